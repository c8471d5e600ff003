"""읽기/수정 타임스탬프 쌍으로 쓰기 허용 여부를 판단하는 낙관적 동시성 가드입니다.

레코드를 마지막으로 읽은 시점 이후에 다른 쓰기가 있었다면 쓰기를 거부한다.
거부는 예외가 아니라 결과 값이며, 호출자(주로 에이전트)는 다시 읽고 재시도하면 된다.
쓰기가 성공하면 read_at을 비워서 다음 쓰기 전에 반드시 다시 읽도록 강제한다.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from studio.utils.helpers import iso_or_never


@dataclass(frozen=True)
class ContentStamps:
    modified_at: Optional[datetime] = None
    read_at: Optional[datetime] = None


@dataclass(frozen=True)
class WriteCheck:
    allowed: bool
    reason: Optional[str] = None


ALLOW = WriteCheck(allowed=True)


def record_read(stamps: ContentStamps, now: datetime) -> ContentStamps:
    return replace(stamps, read_at=now)


def record_write(stamps: ContentStamps, now: datetime) -> ContentStamps:
    return ContentStamps(modified_at=now, read_at=None)


def reset() -> ContentStamps:
    return ContentStamps()


def is_stale(stamps: ContentStamps) -> bool:
    if stamps.modified_at is None:
        return False
    if stamps.read_at is None:
        return True
    return stamps.modified_at > stamps.read_at


def check_write(stamps: ContentStamps, *, subject: str = "Content", read_tool: str = "the read tool") -> WriteCheck:
    """마지막 수정이 마지막 읽기 이후라면 거부 사유를 담아 반환한다."""
    if not is_stale(stamps):
        return ALLOW
    reason = (
        f"{subject} has been modified since it was last read.\n"
        f"Last modification: {iso_or_never(stamps.modified_at)}\n"
        f"Last read: {iso_or_never(stamps.read_at)}\n\n"
        f"Please call {read_tool} to read the current state before making changes."
    )
    return WriteCheck(allowed=False, reason=reason)
