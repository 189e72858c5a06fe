import asyncio

import pytest

from promptdoc.locks import DocumentLocks


async def test_same_document_is_serialized():
    locks = DocumentLocks()
    events: list[str] = []

    async def worker(name: str) -> None:
        async with locks.hold(1):
            events.append(f"{name}:enter")
            await asyncio.sleep(0.01)
            events.append(f"{name}:exit")

    await asyncio.gather(worker("a"), worker("b"))

    assert events == ["a:enter", "a:exit", "b:enter", "b:exit"]


async def test_different_documents_do_not_block():
    locks = DocumentLocks()

    async with locks.hold(1):
        assert locks.locked(1)
        async with asyncio.timeout(1):
            async with locks.hold(2):
                assert locks.locked(2)


async def test_lock_table_is_emptied_after_release():
    locks = DocumentLocks()

    async with locks.hold(7):
        assert len(locks) == 1

    assert len(locks) == 0
    assert not locks.locked(7)


async def test_lock_released_on_error():
    locks = DocumentLocks()

    with pytest.raises(RuntimeError):
        async with locks.hold(3):
            raise RuntimeError("boom")

    assert len(locks) == 0
    async with asyncio.timeout(1):
        async with locks.hold(3):
            pass
