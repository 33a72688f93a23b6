import copy
import json
import random
import threading
import time
from collections import deque
from dataclasses import fields
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional, Set

from strategy_brain.config.settings import MemorySettings, settings as default_settings
from strategy_brain.core.scoring import success_score
from strategy_brain.core.types import (
    ConditionPerformance,
    StrategyPerformance,
    TradeOutcome,
    TradeRecord,
)
from strategy_brain.infrastructure.storage.storage_base import BaseStorage, StorageError
from strategy_brain.monitor.logger import Logger, get_logger


class PerformanceLedger:
    """
    [성과 원장]
    거래 기록 로그 + 전략별 / 레짐별 누적 평균

    - 저장되는 것은 로그뿐 (최대 MAX_RECORDS, 오래된 것부터 제거)
    - 집계는 캐시: 로드 시 로그 순서대로 `update_aggregate` 재적용
    - 신규 기록은 O(1) 증분 갱신
    """

    def __init__(self, storage: BaseStorage, settings: Optional[MemorySettings] = None,
                 logger: Optional[Logger] = None):
        self.settings = settings or default_settings
        self.storage = storage
        self.logger = logger or get_logger()
        self.storage_key = self.settings.STORAGE_KEY

        self.records: Deque[TradeRecord] = deque(maxlen=self.settings.MAX_RECORDS)
        self.performance: Dict[str, StrategyPerformance] = {}
        self._ids: Set[str] = set()
        self._lock = threading.RLock()

        # 마지막 저장 실패 시 False
        self.last_save_ok = True

        self._load()

    def __len__(self) -> int:
        return len(self.records)

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------
    def _load(self):
        try:
            payload = self.storage.load(self.storage_key)
            raw_records = (payload or {}).get("trade_records") or []
            loaded = [TradeRecord.from_dict(r) for r in raw_records]
        except (StorageError, KeyError, TypeError, ValueError, AttributeError) as e:
            self.logger.warning("Failed to load memory, starting empty", key=self.storage_key, error=str(e))
            loaded = []

        with self._lock:
            self.records.clear()
            self.records.extend(loaded)
            self._ids = {r.id for r in self.records}
            self.rebuild()

        self.logger.info("Bot memory loaded", records=len(self.records))

    def _save(self) -> bool:
        payload = {
            "trade_records": [r.to_dict() for r in self.records],
            "last_updated": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self.storage.save(self.storage_key, payload)
            return True
        except StorageError as e:
            self.logger.error("Failed to save memory", key=self.storage_key, error=str(e))
            return False

    # ------------------------------------------------------------------
    # write path
    # ------------------------------------------------------------------
    def _next_id(self) -> str:
        while True:
            trade_id = f"trade-{int(time.time() * 1000)}-{random.randrange(10000)}"
            if trade_id not in self._ids:
                return trade_id

    def _encodable_parameters(self, outcome: TradeOutcome) -> Dict[str, Any]:
        """
        trade_parameters 복사본 (JSON 직렬화 불가 항목 제외)
        남겨두면 이후 모든 저장이 실패함
        """
        params = {}
        for name, value in (outcome.trade_parameters or {}).items():
            try:
                json.dumps({name: value})
            except (TypeError, ValueError) as e:
                self.logger.warning("Dropping non-serialisable trade parameter",
                                    strategy=outcome.strategy_id, parameter=name, error=str(e))
                continue
            params[name] = copy.deepcopy(value)
        return params

    def record_trade(self, outcome: TradeOutcome) -> TradeRecord:
        """청산된 거래 기록 (점수 -> 저장 -> 집계 -> 영속화)"""
        with self._lock:
            values = {f.name: getattr(outcome, f.name) for f in fields(outcome)}
            values["trade_parameters"] = self._encodable_parameters(outcome)
            record = TradeRecord(
                id=self._next_id(),
                success_score=success_score(outcome.pnl_percentage, self.settings),
                **values,
            )

            # 가득 차면 deque가 가장 오래된 기록 제거
            if len(self.records) == self.records.maxlen:
                self._ids.discard(self.records[0].id)
            self.records.append(record)
            self._ids.add(record.id)

            self.update_aggregate(record)
            self.last_save_ok = self._save()

        self.logger.trade_recorded(
            record.symbol, record.strategy_type, record.pnl_percentage,
            record.success_score, str(record.market_condition.regime_key)
        )
        return record

    def update_aggregate(self, record: TradeRecord):
        """2단계 누적 평균 갱신 (전략 전체 / 레짐별)"""
        with self._lock:
            perf = self.performance.get(record.strategy_id)
            if perf is None:
                perf = StrategyPerformance(strategy_id=record.strategy_id,
                                           strategy_type=record.strategy_type)
                self.performance[record.strategy_id] = perf

            pnl_pct = record.pnl_percentage
            score = record.success_score

            perf.total_trades += 1
            if pnl_pct > 0:
                perf.profitable_trades += 1
            n = perf.total_trades
            perf.avg_profit_percentage = (perf.avg_profit_percentage * (n - 1) + pnl_pct) / n
            perf.overall_success_rate = (perf.overall_success_rate * (n - 1) + score) / n

            key = record.market_condition.regime_key
            cond = perf.condition_performance.get(key)
            if cond is None:
                cond = ConditionPerformance()
                perf.condition_performance[key] = cond

            cond.total_trades += 1
            m = cond.total_trades
            cond.avg_profit_percentage = (cond.avg_profit_percentage * (m - 1) + pnl_pct) / m
            cond.success_rate = (cond.success_rate * (m - 1) + score) / m

    def rebuild(self):
        """보관 중인 로그로 집계 재계산"""
        with self._lock:
            self.performance = {}
            for record in self.records:
                self.update_aggregate(record)

    def clear(self) -> bool:
        """로그, 집계, 저장 데이터 삭제. 저장소 삭제 실패 시 False"""
        with self._lock:
            self.records.clear()
            self.performance = {}
            self._ids.clear()
            try:
                self.storage.delete(self.storage_key)
            except StorageError as e:
                self.logger.error("Failed to delete persisted memory", key=self.storage_key, error=str(e))
                return False
        self.logger.info("Bot memory cleared")
        return True

    # ------------------------------------------------------------------
    # read path (스냅샷 반환)
    # ------------------------------------------------------------------
    def get_strategy_records(self, strategy_id: str) -> List[TradeRecord]:
        with self._lock:
            return [r for r in self.records if r.strategy_id == strategy_id]

    def get_all_records(self) -> List[TradeRecord]:
        with self._lock:
            return list(self.records)

    def get_performance(self, strategy_id: str) -> Optional[StrategyPerformance]:
        with self._lock:
            perf = self.performance.get(strategy_id)
            return copy.deepcopy(perf) if perf is not None else None

    def get_all_performance(self) -> List[StrategyPerformance]:
        with self._lock:
            return copy.deepcopy(list(self.performance.values()))
