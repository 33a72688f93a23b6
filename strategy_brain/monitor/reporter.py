"""
[메모리 리포터]
학습 메모리 성과 분석 및 리포트 생성
"""
import json
from typing import Dict

import pandas as pd

from strategy_brain.core.engine import MemoryService


class MemoryReporter:
    """
    메모리 리포터
    - 전체 요약
    - 전략별 성과 (최고 레짐 포함)
    - 레짐별 성과 테이블
    """

    COLUMNS = ["strategy_id", "strategy_type", "regime", "total_trades",
               "success_rate", "avg_profit_percentage"]

    def __init__(self, memory: MemoryService):
        self.memory = memory

    def get_summary(self) -> Dict:
        """전체 요약"""

        records = self.memory.ledger.get_all_records()
        total = len(records)
        wins = len([r for r in records if r.pnl_percentage > 0])

        return {
            'total_records': total,
            'strategies': len(self.memory.get_all_performance_metrics()),
            'win_rate': (wins / total * 100) if total > 0 else 0,
            'avg_success_score': (sum(r.success_score for r in records) / total) if total > 0 else 0,
            'avg_pnl_percentage': (sum(r.pnl_percentage for r in records) / total) if total > 0 else 0,
        }

    def get_strategy_report(self) -> Dict:
        """전략별 리포트"""

        report = {}

        for perf in self.memory.get_all_performance_metrics():
            best_regime = None
            if perf.condition_performance:
                key, _ = max(perf.condition_performance.items(),
                             key=lambda item: item[1].success_rate)
                best_regime = str(key)

            report[perf.strategy_id] = {
                'strategy_type': perf.strategy_type,
                'trades': perf.total_trades,
                'profitable_trades': perf.profitable_trades,
                'win_rate': perf.profitable_trades / perf.total_trades * 100,
                'success_rate': perf.overall_success_rate,
                'avg_profit_percentage': perf.avg_profit_percentage,
                'best_regime': best_regime,
            }

        return report

    def performance_frame(self) -> pd.DataFrame:
        """One row per (strategy, regime)."""

        rows = [
            {
                'strategy_id': perf.strategy_id,
                'strategy_type': perf.strategy_type,
                'regime': str(key),
                'total_trades': cond.total_trades,
                'success_rate': cond.success_rate,
                'avg_profit_percentage': cond.avg_profit_percentage,
            }
            for perf in self.memory.get_all_performance_metrics()
            for key, cond in perf.condition_performance.items()
        ]
        return pd.DataFrame(rows, columns=self.COLUMNS)

    def export_json(self, filepath: str):
        """JSON 내보내기"""

        data = {
            'summary': self.get_summary(),
            'strategies': self.get_strategy_report(),
            'regimes': self.performance_frame().to_dict(orient='records'),
        }

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)
