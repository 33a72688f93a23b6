"""
[텔레그램 알림]
사용자 알림 전송 (메모리 저장 실패, 메모리 초기화, 거래 완료)
"""
import requests
from typing import Optional
from datetime import datetime

from strategy_brain.config.settings import settings
from strategy_brain.monitor.logger import Logger, get_logger


class TelegramNotifier:
    """
    텔레그램 알림 봇
    - 경고 알림
    - 에러 알림
    - 완료 알림
    비활성화 상태에서는 로그만 남긴다.
    """

    def __init__(self, token: Optional[str] = None, chat_id: Optional[str] = None,
                 logger: Optional[Logger] = None):
        self.token = token or settings.TELEGRAM_TOKEN
        self.chat_id = chat_id or settings.TELEGRAM_CHAT_ID
        self.enabled = bool(self.token and self.chat_id)
        self.logger = logger or get_logger()
        self.base_url = f"https://api.telegram.org/bot{self.token}" if self.enabled else ""

    def _send(self, message: str, parse_mode: str = "HTML") -> bool:
        """메시지 전송"""
        if not self.enabled:
            return False

        try:
            url = f"{self.base_url}/sendMessage"
            data = {
                'chat_id': self.chat_id,
                'text': message,
                'parse_mode': parse_mode
            }
            response = requests.post(url, data=data, timeout=10)
            return response.ok
        except requests.RequestException as e:
            self.logger.warning("Telegram send failed", error=str(e))
            return False

    def warning_alert(self, title: str, message: str) -> bool:
        """경고 알림"""
        self.logger.warning(title, detail=message)

        text = f"""
⚠️ <b>WARNING: {title}</b>

{message}

⏰ {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}
"""
        return self._send(text)

    def error_alert(self, error: str, details: str = "") -> bool:
        """에러 알림"""
        self.logger.error(error, detail=details)

        message = f"""
🚨 <b>ERROR</b>

{error}
{details}

⏰ {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}
"""
        return self._send(message)

    def success_alert(self, title: str, message: str) -> bool:
        """완료 알림"""
        self.logger.info(title, detail=message)

        text = f"""
✅ <b>{title}</b>

{message}
"""
        return self._send(text)

    def trade_completed(self, symbol: str, pnl: float, pnl_pct: float) -> bool:
        """거래 완료 알림"""
        sign = "+" if pnl > 0 else ""
        return self.success_alert(
            "Trade completed and recorded",
            f"{symbol}: {sign}{pnl:.2f} USD ({sign}{pnl_pct:.2f}%)"
        )
