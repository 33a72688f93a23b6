"""
[로거]
메모리 이벤트 구조화 로깅 (콘솔 + JSON lines 파일)
"""
import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, TextIO


class LogLevel(Enum):
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4


_COLORS = {
    LogLevel.DEBUG: '\033[90m',
    LogLevel.INFO: '\033[92m',
    LogLevel.WARNING: '\033[93m',
    LogLevel.ERROR: '\033[91m',
    LogLevel.CRITICAL: '\033[95m',
}
_RESET = '\033[0m'


class Logger:
    """
    구조화된 로거
    - 레벨 필터링
    - 색상 콘솔 한 줄 출력 (key=value)
    - 파일: 한 줄에 JSON 하나
    """

    def __init__(self, name: str = "StrategyMemory", level: LogLevel = LogLevel.INFO,
                 log_file: Optional[str] = None):
        self.name = name
        self.level = level
        self.log_file = log_file

        self._stream: Optional[TextIO] = None
        if log_file:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = path.open('a', encoding='utf-8')

    def log(self, level: LogLevel, message: str, **data: Any):
        if level.value < self.level.value:
            return

        now = datetime.now(timezone.utc)
        print(self._console_line(level, now, message, data))

        if self._stream:
            entry: Dict[str, Any] = {
                'timestamp': now.isoformat(),
                'level': level.name,
                'logger': self.name,
                'message': message,
            }
            if data:
                entry['data'] = data
            self._stream.write(json.dumps(entry, ensure_ascii=False, default=str) + '\n')
            self._stream.flush()

    @staticmethod
    def _console_line(level: LogLevel, now: datetime, message: str, data: Dict[str, Any]) -> str:
        line = f"{_COLORS[level]}[{now:%H:%M:%S}] [{level.name:8}] {message}{_RESET}"
        if data:
            line += " | " + " | ".join(f"{k}={v}" for k, v in data.items())
        return line

    def debug(self, message: str, **data: Any):
        self.log(LogLevel.DEBUG, message, **data)

    def info(self, message: str, **data: Any):
        self.log(LogLevel.INFO, message, **data)

    def warning(self, message: str, **data: Any):
        self.log(LogLevel.WARNING, message, **data)

    def error(self, message: str, **data: Any):
        self.log(LogLevel.ERROR, message, **data)

    def critical(self, message: str, **data: Any):
        self.log(LogLevel.CRITICAL, message, **data)

    def trade_recorded(self, symbol: str, strategy_type: str, pnl_pct: float,
                       score: int, regime: str):
        """거래 기록 이벤트"""
        self.info("MEMORY: TRADE RECORDED", symbol=symbol, strategy=strategy_type,
                  pnl=f"{pnl_pct:+.2f}%", score=score, regime=regime)

    def recommendation(self, symbol: str, strategy_id: Optional[str],
                       confidence: float, regime: str):
        """추천 이벤트"""
        self.info("MEMORY: RECOMMENDATION", symbol=symbol, strategy=strategy_id or '-',
                  confidence=f"{confidence:.1f}", regime=regime)

    def close(self):
        if self._stream:
            self._stream.close()
            self._stream = None


# 글로벌 로거
_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """설정 기반 글로벌 로거 (최초 호출 시 생성)"""
    global _logger
    if _logger is None:
        from strategy_brain.config.settings import settings
        _logger = Logger(level=LogLevel[settings.LOG_LEVEL.upper()], log_file=settings.LOG_FILE)
    return _logger
