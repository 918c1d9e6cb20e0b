"""Fake implementations and model factories for tests."""

from datetime import UTC, datetime, timedelta
from typing import Any

from threads_tree.models.entity import Container, Group, Thread, ThreadsData

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def ago(days: float, now: datetime = NOW) -> str:
    """ISO timestamp ``days`` before ``now``."""
    return (now - timedelta(days=days)).isoformat()


def make_thread(thread_id: str, **kwargs: Any) -> Thread:
    defaults: dict[str, Any] = {
        "name": f"Thread {thread_id}",
        "created_at": ago(60),
        "updated_at": ago(0.5),
    }
    defaults.update(kwargs)
    return Thread(id=thread_id, **defaults)


def make_container(container_id: str, **kwargs: Any) -> Container:
    defaults: dict[str, Any] = {
        "name": f"Container {container_id}",
        "created_at": ago(60),
        "updated_at": ago(10),
    }
    defaults.update(kwargs)
    return Container(id=container_id, **defaults)


def make_group(group_id: str, name: str) -> Group:
    return Group(id=group_id, name=name, created_at=ago(90), updated_at=ago(90))


class FakeStore:
    """In-memory fake for JsonFileStore.

    Returns a fixed snapshot and counts loads for assertions.
    """

    def __init__(self, data: ThreadsData | None = None) -> None:
        self.data = data or ThreadsData()
        self.loads = 0

    def load(self) -> ThreadsData:
        self.loads += 1
        return self.data


def sample_document(now: datetime = NOW) -> dict[str, Any]:
    """Stored (camelCase) form, as found in ~/.threads/threads.json, aged relative to ``now``."""

    def stamp(days: float) -> str:
        return (now - timedelta(days=days)).isoformat()

    return {
        "version": "1.0.0",
        "groups": [
            {"id": "g-work", "name": "Work", "description": "", "createdAt": stamp(90), "updatedAt": stamp(90)},
            {"id": "g-home", "name": "Home", "description": "", "createdAt": stamp(90), "updatedAt": stamp(90)},
            {"id": "g-empty", "name": "Attic", "description": "", "createdAt": stamp(90), "updatedAt": stamp(90)},
        ],
        "threads": [
            {
                "type": "thread",
                "id": "t-api-0001",
                "name": "Ship API",
                "description": "Public REST API",
                "status": "active",
                "importance": 5,
                "size": "large",
                "parentId": "c-backend",
                "groupId": "g-work",
                "tags": ["backend", "urgent"],
                "links": [],
                "dependencies": [
                    {"threadId": "t-auth-0002", "why": "needs tokens", "what": "", "how": "", "when": ""}
                ],
                "progress": [
                    {"id": "p1", "timestamp": stamp(3), "note": "drafted endpoints"},
                    {"id": "p2", "timestamp": stamp(0.5), "note": "wrote tests"},
                ],
                "details": [
                    {"id": "d1", "timestamp": stamp(5), "content": "old"},
                    {"id": "d2", "timestamp": stamp(1), "content": "current state\nsecond line"},
                ],
                "createdAt": stamp(40),
                "updatedAt": stamp(0.5),
            },
            {
                "id": "t-auth-0002",
                "name": "Auth tokens",
                "description": "",
                "status": "paused",
                "importance": 3,
                "size": "medium",
                "parentId": "t-api-0001",
                "groupId": "g-work",
                "tags": [],
                "dependencies": [],
                "progress": [],
                "details": [],
                "createdAt": stamp(40),
                "updatedAt": stamp(10),
            },
            {
                "id": "t-garden-03",
                "name": "Garden",
                "description": "",
                "status": "active",
                "importance": 2,
                "size": "small",
                "parentId": None,
                "groupId": "g-home",
                "tags": ["outdoor"],
                "dependencies": [],
                "progress": [],
                "details": [],
                "createdAt": stamp(20),
                "updatedAt": stamp(2),
            },
            {
                "id": "t-taxes-04",
                "name": "Taxes",
                "description": "",
                "status": "active",
                "importance": 4,
                "size": "medium",
                "parentId": None,
                "groupId": None,
                "tags": [],
                "dependencies": [],
                "progress": [],
                "details": [],
                "createdAt": stamp(50),
                "updatedAt": stamp(45),
            },
            {
                "id": "t-old-0005",
                "name": "Old project",
                "description": "",
                "status": "archived",
                "importance": 1,
                "size": "tiny",
                "parentId": None,
                "groupId": None,
                "tags": [],
                "dependencies": [],
                "progress": [],
                "details": [],
                "createdAt": stamp(200),
                "updatedAt": stamp(100),
            },
        ],
        "containers": [
            {
                "type": "container",
                "id": "c-backend",
                "name": "Backend",
                "description": "",
                "parentId": None,
                "groupId": "g-work",
                "tags": ["infra"],
                "details": [],
                "createdAt": stamp(60),
                "updatedAt": stamp(30),
            },
        ],
    }


SAMPLE_DOCUMENT = sample_document()


def make_chain(length: int, **kwargs: Any) -> list[Thread]:
    """Threads ``n0 <- n1 <- ... `` where each names the previous one as parent."""
    chain = [make_thread("n0", **kwargs)]
    for i in range(1, length):
        chain.append(make_thread(f"n{i}", parent_id=f"n{i - 1}", **kwargs))
    return chain
