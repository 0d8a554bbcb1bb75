"""SIM implementation - simulated ST2 backend for local development and tests."""

import json
import os
import random
from collections import defaultdict
from typing import Any, Protocol

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from st2dash.logging_config import get_logger

logger = get_logger(__name__)

NANOS_PER_SEC = 1_000_000_000
EPOCH_SPAN = NANOS_PER_SEC  # each epoch starts one simulated second after the previous

LOCAL_KINDS = ["Processing", "Spinning", "Waiting", "Busy"]
MESSAGE_KINDS = ["DataMessage", "ControlMessage"]


class ISim(Protocol):
    """Answer backend requests with synthetic data."""

    def respond(self, request: dict) -> dict | None:
        """Build the frame answering one request, or None for unknown requests."""
        ...


class Sim:
    """Deterministic synthetic backend: same epoch, same data."""

    def __init__(
        self,
        workers: int = 2,
        activities_per_worker: int = 20,
        seed: int = 0,
        epoch_max_ms: int = 12,
        operator_max_ms: int = 2,
        message_max_ms: int = 1,
    ):
        self._workers = workers
        self._activities = activities_per_worker
        self._seed = seed
        self._epoch_max = epoch_max_ms * 1_000_000
        self._operator_max = operator_max_ms * 1_000_000
        self._message_max = message_max_ms * 1_000_000
        self._polls = 0

    def _rng(self, epoch: int) -> random.Random:
        return random.Random(self._seed * 1_000_003 + epoch)

    def pag(self, epoch: int) -> list[dict[str, Any]]:
        """Activity edges of one epoch, sorted by source timestamp."""
        rng = self._rng(epoch)
        start = epoch * EPOCH_SPAN
        cursors = [start for _ in range(self._workers)]
        edges = []

        for _ in range(self._activities):
            for worker in range(self._workers):
                t = cursors[worker]
                if self._workers > 1 and rng.random() < 0.25:
                    other = rng.choice([w for w in range(self._workers) if w != worker])
                    kind = rng.choice(MESSAGE_KINDS)
                    latency = rng.randint(20_000, 1_500_000)
                    edges.append(self._edge(kind, worker, t, other, t + latency, epoch, 0,
                                            rng.randint(1, 64) if kind == "DataMessage" else 0))
                    cursors[worker] = t + rng.randint(5_000, 50_000)
                else:
                    kind = rng.choice(LOCAL_KINDS)
                    duration = rng.randint(10_000, 2_500_000)
                    operator = rng.randint(1, 8) if kind in ("Processing", "Spinning") else 0
                    length = rng.randint(1, 256) if kind == "Processing" else 0
                    edges.append(self._edge(kind, worker, t, worker, t + duration, epoch, operator, length))
                    cursors[worker] = t + duration

        edges.sort(key=lambda e: e["src"]["t"])
        return edges

    @staticmethod
    def _edge(kind, src_w, src_t, dst_w, dst_t, epoch, operator, length) -> dict[str, Any]:
        return {
            "src": {"t": src_t, "w": src_w, "e": epoch},
            "dst": {"t": dst_t, "w": dst_w, "e": epoch},
            "type": kind,
            "o": operator,
            "tr": "Block" if kind in ("Waiting", "Busy") else "Unbounded",
            "l": length,
        }

    def agg(self, epoch: int) -> list[dict[str, Any]]:
        """K-hop summary up to `epoch`, one row per (type, worker)."""
        counts: dict[tuple[str, int], list[int]] = defaultdict(lambda: [0, 0])
        for e in range(epoch + 1):
            for edge in self.pag(e):
                acc = counts[(edge["type"], edge["src"]["w"])]
                acc[0] += 1
                acc[1] += max(1, (edge["dst"]["t"] - edge["src"]["t"]) // 100_000)
        return [
            {"a": a, "wf": wf, "ac": ac, "wac": wac}
            for (a, wf), (ac, wac) in sorted(counts.items())
        ]

    def highlights(self, epoch: int) -> list[list[int]]:
        """Every third edge of the epoch is on a highlighted path."""
        return [[edge["src"]["t"], edge["dst"]["t"]] for edge in self.pag(epoch)[::3]]

    def met(self, epoch: int) -> list[dict[str, Any]]:
        """Metrics per (from worker, to worker, type)."""
        metrics: dict[tuple[int, int | None, str], list[int]] = defaultdict(lambda: [0, 0, 0])
        for edge in self.pag(epoch):
            wt = edge["dst"]["w"] if edge["type"] in MESSAGE_KINDS else None
            acc = metrics[(edge["src"]["w"], wt, edge["type"])]
            acc[0] += 1
            acc[1] += edge["dst"]["t"] - edge["src"]["t"]
            acc[2] += edge["l"]
        return [
            {"wf": wf, "wt": wt, "a": a, "ac": ac, "at": at, "rc": rc}
            for (wf, wt, a), (ac, at, rc) in metrics.items()
        ]

    @staticmethod
    def _node(t: int, worker: int, epoch: int, seq_no: int = 0) -> dict[str, Any]:
        return {
            "timestamp": {"secs": t // NANOS_PER_SEC, "nanos": t % NANOS_PER_SEC},
            "worker_id": worker,
            "epoch": epoch,
            "seq_no": seq_no,
        }

    def _pag_edge(self, edge: dict[str, Any]) -> dict[str, Any]:
        return {
            "source": self._node(edge["src"]["t"], edge["src"]["w"], edge["src"]["e"]),
            "destination": self._node(edge["dst"]["t"], edge["dst"]["w"], edge["dst"]["e"]),
            "edge_type": edge["type"],
            "operator_id": edge["o"] or None,
            "traverse": edge["tr"],
            "length": edge["l"] or None,
        }

    def invariants(self) -> list[dict[str, Any]]:
        """Violations found since the previous poll (one simulated epoch per poll)."""
        epoch = self._polls
        self._polls += 1
        edges = self.pag(epoch)
        violations: list[dict[str, Any]] = []

        first, last = edges[0], max(edges, key=lambda e: e["dst"]["t"])
        if last["dst"]["t"] - first["src"]["t"] > self._epoch_max:
            violations.append({"Epoch": {
                "max": self._epoch_max,
                "from": self._node(first["src"]["t"], first["src"]["w"], epoch),
                "to": self._node(last["dst"]["t"], last["dst"]["w"], epoch),
            }})

        for edge in edges:
            duration = edge["dst"]["t"] - edge["src"]["t"]
            if edge["type"] == "Processing" and duration > self._operator_max:
                pag_edge = self._pag_edge(edge)
                violations.append({"Operator": {
                    "max": self._operator_max, "from": pag_edge, "to": pag_edge,
                }})
            elif edge["type"] in MESSAGE_KINDS and duration > self._message_max:
                violations.append({"Message": {
                    "max": self._message_max, "msg": self._pag_edge(edge),
                }})

        return violations

    def respond(self, request: dict) -> dict | None:
        """Build the frame answering one request, or None for unknown requests."""
        kind = request.get("type")
        if kind == "INV":
            return {"type": "INV", "payload": self.invariants()}

        epoch = request.get("epoch")
        if not isinstance(epoch, int) or epoch < 0:
            return None

        builders = {
            "PAG": self.pag,
            "AGG": self.agg,
            "ALL": self.highlights,
            "MET": self.met,
        }
        builder = builders.get(kind)
        if builder is None:
            return None
        return {"type": kind, "payload": builder(epoch)}


def create_sim_app(sim: ISim | None = None) -> FastAPI:
    """FastAPI app serving the backend wire protocol on a WebSocket at '/'."""
    sim = sim or Sim()
    app = FastAPI(title="ST2 Backend Simulator", version="0.1.0")

    @app.websocket("/")
    async def backend(websocket: WebSocket) -> None:
        await websocket.accept()
        logger.info("SIM: client connected")
        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    request = json.loads(raw)
                except ValueError:
                    logger.error("SIM: malformed request %r", raw[:100])
                    continue
                if not isinstance(request, dict):
                    continue

                frame = sim.respond(request)
                if frame is None:
                    logger.error("SIM: unsupported request %s", request)
                    continue

                await websocket.send_text(json.dumps(frame))
                logger.info("SIM: %s -> %s entries", request, len(frame["payload"]))
        except WebSocketDisconnect:
            logger.info("SIM: client disconnected")

    return app


def main():
    """Run the simulated backend."""
    host = os.getenv("SIM_HOST", "127.0.0.1")
    port = int(os.getenv("SIM_PORT", "3012"))
    uvicorn.run(create_sim_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
