"""
Outbound instructions produced by the core and their delivery.

Core operations return a list of instructions instead of calling the
transport directly; the dispatcher delivers them in order. One failed
instruction never prevents the following ones from being sent.
"""

from dataclasses import dataclass
from typing import Optional, Union

from farmbot.core.logging import get_logger
from farmbot.services.interfaces.notifier import NotificationResult, Notifier

logger = get_logger(__name__)


@dataclass(frozen=True)
class SendText:
    target_id: int
    text: str
    keyboard: Optional[dict] = None


@dataclass(frozen=True)
class EditText:
    target_id: int
    message_id: int
    text: str
    keyboard: Optional[dict] = None


@dataclass(frozen=True)
class AnswerAction:
    action_id: str
    text: str
    is_alert: bool = False


Outbound = Union[SendText, EditText, AnswerAction]


async def deliver(notifier: Notifier, instructions: list[Outbound]) -> list[NotificationResult]:
    results = []
    for instruction in instructions:
        try:
            if isinstance(instruction, SendText):
                result = await notifier.send_text(
                    instruction.target_id, instruction.text, instruction.keyboard
                )
            elif isinstance(instruction, EditText):
                result = await notifier.edit_text(
                    instruction.target_id, instruction.message_id, instruction.text, instruction.keyboard
                )
            else:
                result = await notifier.answer_action(
                    instruction.action_id, instruction.text, instruction.is_alert
                )
        except Exception as e:
            # Notifier implementations should not raise; a buggy one must not abort the batch
            logger.exception("notification_raised", instruction=type(instruction).__name__, error=str(e))
            result = NotificationResult(ok=False, body=str(e))
        results.append(result)

    failed = sum(1 for r in results if not r.ok)
    if failed:
        logger.warning("notifications_partially_failed", failed=failed, total=len(results))
    return results
