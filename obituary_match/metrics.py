# obituary_match/metrics.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Deque
from collections import deque
import threading
import time


@dataclass
class RollingStats:
    maxlen: int = 5000
    lat_ms: Deque[float] = field(init=False)
    results: Deque[int] = field(init=False)

    def __post_init__(self) -> None:
        self.lat_ms = deque(maxlen=self.maxlen)
        self.results = deque(maxlen=self.maxlen)

    def add(self, latency_ms: float, result_count: int) -> None:
        self.lat_ms.append(latency_ms)
        self.results.append(result_count)

    @staticmethod
    def mean(arr) -> float:
        if not arr:
            return 0.0
        return sum(arr) / len(arr)

    @staticmethod
    def p95(arr) -> float:
        if not arr:
            return 0.0
        s = sorted(arr)
        idx = int(0.95 * (len(s) - 1))
        return s[idx]


@dataclass
class Metrics:
    started_at: float = field(default_factory=time.time)

    total_requests: int = 0
    total_blank_queries: int = 0
    total_searches: int = 0
    total_empty_results: int = 0

    # top queries (normalizadas) con contador
    top_queries: Dict[str, int] = field(default_factory=dict)

    # rolling
    rolling: RollingStats = field(default_factory=RollingStats)

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def inc_request(self, query_norm: str) -> None:
        with self._lock:
            self.total_requests += 1
            if not query_norm.strip():
                self.total_blank_queries += 1
                return
            self.top_queries[query_norm] = self.top_queries.get(query_norm, 0) + 1

    def add_search_stats(self, latency_ms: float, result_count: int) -> None:
        with self._lock:
            self.total_searches += 1
            if result_count == 0:
                self.total_empty_results += 1
            self.rolling.add(latency_ms=latency_ms, result_count=result_count)

    def snapshot(self, topk: int = 10) -> Dict:
        with self._lock:
            uptime_s = time.time() - self.started_at
            top = sorted(self.top_queries.items(), key=lambda x: x[1], reverse=True)[:topk]
            empty_rate = (self.total_empty_results / self.total_searches) if self.total_searches else 0.0

            return {
                "uptime_seconds": round(uptime_s, 2),
                "total_requests": self.total_requests,
                "total_blank_queries": self.total_blank_queries,
                "total_searches": self.total_searches,
                "total_empty_results": self.total_empty_results,
                "empty_result_rate": round(empty_rate, 4),

                "latency_ms_avg": round(self.rolling.mean(self.rolling.lat_ms), 2),
                "latency_ms_p95": round(self.rolling.p95(self.rolling.lat_ms), 2),
                "results_avg": round(self.rolling.mean(self.rolling.results), 2),
                "results_p95": round(self.rolling.p95(self.rolling.results), 2),

                "top_queries": [{"query": q, "count": c} for q, c in top],
            }
