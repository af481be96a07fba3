"""Live-chat sources and the events they emit.

A live source connects to a broadcaster's stream and pushes events to a single
``on_event`` callback. The event set is closed: connection status
(``Connected``/``ConnectionFailed``), ``ChatEvent`` which drives scoring, and
display-only pass-through events.

``TikTokLiveSource`` is the default implementation, built on the TikTokLive
client. Any object with the same ``connect``/``disconnect`` shape can be
plugged in instead.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Union

from TikTokLive import TikTokLiveClient
from TikTokLive import events as tiktok

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Connected:
    room_id: str
    broadcaster_id: str

    def to_payload(self) -> Dict[str, Any]:
        return {'roomId': self.room_id, 'uniqueId': self.broadcaster_id}


@dataclass(frozen=True)
class ConnectionFailed:
    message: str


@dataclass(frozen=True)
class ChatEvent:
    participant_id: str
    comment: str
    nickname: str = ''
    name = 'chat'

    def to_payload(self) -> Dict[str, Any]:
        return {'participantId': self.participant_id, 'nickname': self.nickname, 'comment': self.comment}


@dataclass(frozen=True)
class GiftEvent:
    participant_id: str
    gift_name: str
    repeat_count: int = 1
    nickname: str = ''
    name = 'gift'

    def to_payload(self) -> Dict[str, Any]:
        return {
            'participantId': self.participant_id,
            'nickname': self.nickname,
            'giftName': self.gift_name,
            'repeatCount': self.repeat_count,
        }


@dataclass(frozen=True)
class LikeEvent:
    participant_id: str
    like_count: int = 1
    total_likes: int = 0
    nickname: str = ''
    name = 'like'

    def to_payload(self) -> Dict[str, Any]:
        return {
            'participantId': self.participant_id,
            'nickname': self.nickname,
            'likeCount': self.like_count,
            'totalLikes': self.total_likes,
        }


@dataclass(frozen=True)
class MemberEvent:
    participant_id: str
    nickname: str = ''
    name = 'member'

    def to_payload(self) -> Dict[str, Any]:
        return {'participantId': self.participant_id, 'nickname': self.nickname}


@dataclass(frozen=True)
class SocialEvent:
    participant_id: str
    action: str
    nickname: str = ''
    name = 'social'

    def to_payload(self) -> Dict[str, Any]:
        return {'participantId': self.participant_id, 'nickname': self.nickname, 'action': self.action}


@dataclass(frozen=True)
class RoomUserEvent:
    viewer_count: int
    name = 'roomUser'

    def to_payload(self) -> Dict[str, Any]:
        return {'viewerCount': self.viewer_count}


@dataclass(frozen=True)
class StreamEnd:
    name = 'streamEnd'

    def to_payload(self) -> Dict[str, Any]:
        return {}


PassThroughEvent = Union[GiftEvent, LikeEvent, MemberEvent, SocialEvent, RoomUserEvent, StreamEnd]
LiveEvent = Union[Connected, ConnectionFailed, ChatEvent, PassThroughEvent]
EventSink = Callable[[LiveEvent], None]

PASS_THROUGH_EVENTS = (GiftEvent, LikeEvent, MemberEvent, SocialEvent, RoomUserEvent, StreamEnd)


class LiveSource(Protocol):
    def connect(self, broadcaster_id: str, on_event: EventSink) -> None: ...

    def disconnect(self) -> None: ...


class LiveSourceError(Exception):
    pass


def _user_fields(user) -> Dict[str, str]:
    if user is None:
        return {'participant_id': '', 'nickname': ''}
    return {'participant_id': user.unique_id or '', 'nickname': user.nickname or ''}


class TikTokLiveSource:
    """Relay a TikTok Live room through the TikTokLive client.

    The client is asyncio based, so each connection runs its own event loop
    on a background task started with ``spawn``. ``disconnect`` may arrive
    at any point of that startup; the worker re-checks it once the client
    exists and again when the room connects.
    """

    def __init__(self, spawn: Callable) -> None:
        self._spawn = spawn
        self._lock = threading.Lock()
        self._client: Optional[TikTokLiveClient] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._started = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def connect(self, broadcaster_id: str, on_event: EventSink) -> None:
        with self._lock:
            if self._started:
                raise LiveSourceError('live source already connected')
            self._started = True
        self._spawn(self._run, broadcaster_id, on_event)

    def disconnect(self) -> None:
        with self._lock:
            self._closed = True
            client, loop = self._client, self._loop
            if client is None or loop is None or loop.is_closed():
                return
            logger.info(f"[live-disconnect] room={client.room_id}")
            asyncio.run_coroutine_threadsafe(client.disconnect(), loop)

    def _run(self, broadcaster_id: str, on_event: EventSink) -> None:
        if self._closed:
            return
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            client = TikTokLiveClient(unique_id=broadcaster_id)
            with self._lock:
                if self._closed:
                    logger.info(f"[live-abort] broadcaster={broadcaster_id} closed before connect")
                    return
                self._client = client
                self._loop = loop
            self._bind(client, broadcaster_id, on_event)
            logger.info(f"[live-connect] broadcaster={broadcaster_id}")
            loop.run_until_complete(client.connect())
        except Exception as exc:
            if not self._closed:
                logger.error(f"[live-error] broadcaster={broadcaster_id} error={exc!r}")
                on_event(ConnectionFailed(str(exc) or exc.__class__.__name__))
        finally:
            with self._lock:
                loop.close()
            asyncio.set_event_loop(None)

    def _bind(self, client: TikTokLiveClient, broadcaster_id: str, on_event: EventSink) -> None:
        async def on_connect(event: tiktok.ConnectEvent):
            if self._closed:
                logger.info(f"[live-abort] broadcaster={broadcaster_id} closed while connecting")
                await client.disconnect()
                return
            logger.info(f"[live-connected] broadcaster={broadcaster_id} room={client.room_id}")
            on_event(Connected(room_id=str(client.room_id), broadcaster_id=broadcaster_id))

        async def on_comment(event: tiktok.CommentEvent):
            on_event(ChatEvent(comment=event.comment or '', **_user_fields(event.user)))

        async def on_gift(event: tiktok.GiftEvent):
            on_event(GiftEvent(
                gift_name=event.gift.name,
                repeat_count=event.repeat_count,
                **_user_fields(event.user),
            ))

        async def on_like(event: tiktok.LikeEvent):
            on_event(LikeEvent(
                like_count=event.count,
                total_likes=event.total,
                **_user_fields(event.user),
            ))

        async def on_join(event: tiktok.JoinEvent):
            on_event(MemberEvent(**_user_fields(event.user)))

        async def on_follow(event: tiktok.FollowEvent):
            on_event(SocialEvent(action='follow', **_user_fields(event.user)))

        async def on_share(event: tiktok.ShareEvent):
            on_event(SocialEvent(action='share', **_user_fields(event.user)))

        async def on_room_user(event: tiktok.RoomUserSeqEvent):
            on_event(RoomUserEvent(viewer_count=event.total))

        async def on_live_end(event: tiktok.LiveEndEvent):
            on_event(StreamEnd())

        client.add_listener(tiktok.ConnectEvent, on_connect)
        client.add_listener(tiktok.CommentEvent, on_comment)
        client.add_listener(tiktok.GiftEvent, on_gift)
        client.add_listener(tiktok.LikeEvent, on_like)
        client.add_listener(tiktok.JoinEvent, on_join)
        client.add_listener(tiktok.FollowEvent, on_follow)
        client.add_listener(tiktok.ShareEvent, on_share)
        client.add_listener(tiktok.RoomUserSeqEvent, on_room_user)
        client.add_listener(tiktok.LiveEndEvent, on_live_end)
