"""
Break Notifier — platform-aware desktop notification when a break starts.
Delivery is best-effort: every failure returns False.
"""

from __future__ import annotations

import logging
import subprocess
import sys

logger = logging.getLogger(__name__)


class BreakNotifier:

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.sent = 0

    def notify(self, title: str = "Time for a break", message: str = "Stand up and stretch.") -> bool:
        if not self.enabled:
            return False
        if sys.platform == "win32":
            ok = self._windows_toast(title, message)
        elif sys.platform == "darwin":
            ok = self._macos_notification(title, message)
        else:
            ok = self._linux_notification(title, message)
        if ok:
            self.sent += 1
        else:
            logger.warning("Break notification could not be delivered")
        return ok

    # ------------------------------------------------------------------
    # Platform implementations
    # ------------------------------------------------------------------

    def _windows_toast(self, title: str, message: str) -> bool:
        script = (
            "[Windows.UI.Notifications.ToastNotificationManager, Windows.UI.Notifications, ContentType = WindowsRuntime] > $null; "
            "$xml = [Windows.UI.Notifications.ToastNotificationManager]::GetTemplateContent("
            "[Windows.UI.Notifications.ToastTemplateType]::ToastText02); "
            f"$xml.GetElementsByTagName('text')[0].AppendChild($xml.CreateTextNode('{title}')) > $null; "
            f"$xml.GetElementsByTagName('text')[1].AppendChild($xml.CreateTextNode('{message}')) > $null; "
            "[Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier('StretchCat')"
            ".Show([Windows.UI.Notifications.ToastNotification]::new($xml))"
        )
        return self._run(["powershell", "-Command", script])

    def _macos_notification(self, title: str, message: str) -> bool:
        return self._run([
            "osascript", "-e",
            f'display notification "{message}" with title "{title}"',
        ])

    def _linux_notification(self, title: str, message: str) -> bool:
        return self._run(["notify-send", title, message])

    @staticmethod
    def _run(cmd: list[str]) -> bool:
        try:
            subprocess.run(cmd, check=True, capture_output=True, timeout=5)
            return True
        except (OSError, subprocess.SubprocessError):
            return False
