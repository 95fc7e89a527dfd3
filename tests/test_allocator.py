import asyncio

import pytest

from nfsmamont.allocator import Allocator, Slice

FIRST = bytes([1, 2, 3, 4, 5])
SECOND = bytes([6, 7, 8])
THIRD = bytes([9, 10, 11])

F, S, T = len(FIRST), len(SECOND), len(THIRD)
ALL_F = [1, 2, 3, 4, 5]
ALL_S = [6, 7, 8]
ALL_T = [9, 10, 11]


def make_slice(buffers, start, stop):
    released = []
    piece = Slice([bytearray(b) for b in buffers], start, stop, released.append)
    return piece, released


def check_content(piece, expected):
    iterator = iter(piece)
    for chunk in expected:
        assert bytes(next(iterator)) == bytes(chunk)
    for _ in range(3):
        assert next(iterator, None) is None


CASES = [
    # one buffer
    ([FIRST], 0, 0, []),
    ([FIRST], 1, 1, []),
    ([FIRST], F, F, []),
    ([FIRST], 0, 1, [[1]]),
    ([FIRST], 1, 2, [[2]]),
    ([FIRST], F - 1, F, [[5]]),
    ([FIRST], 0, F // 2, [[1, 2]]),
    ([FIRST], F // 2, F, [[3, 4, 5]]),
    ([FIRST], 0, F, [ALL_F]),
    # two buffers, range in first
    ([FIRST, SECOND], 0, 0, []),
    ([FIRST, SECOND], 1, 1, []),
    ([FIRST, SECOND], F, F, []),
    ([FIRST, SECOND], 0, 1, [[1]]),
    ([FIRST, SECOND], 1, 2, [[2]]),
    ([FIRST, SECOND], F - 1, F, [[5]]),
    ([FIRST, SECOND], 0, F // 2, [[1, 2]]),
    ([FIRST, SECOND], F // 2, F, [[3, 4, 5]]),
    ([FIRST, SECOND], 0, F, [ALL_F]),
    # two buffers, range in second
    ([FIRST, SECOND], 1 + F, 1 + F, []),
    ([FIRST, SECOND], F + S, F + S, []),
    ([FIRST, SECOND], F, F + 1, [[6]]),
    ([FIRST, SECOND], F + 1, F + 2, [[7]]),
    ([FIRST, SECOND], F + S - 1, F + S, [[8]]),
    ([FIRST, SECOND], F, F + S // 2, [[6]]),
    ([FIRST, SECOND], F + S // 2, F + S, [[7, 8]]),
    ([FIRST, SECOND], F, F + S, [ALL_S]),
    # two buffers, across
    ([FIRST, SECOND], F - 1, F + 1, [[5], [6]]),
    ([FIRST, SECOND], 0, 1 + F, [ALL_F, [6]]),
    ([FIRST, SECOND], F - 1, F + S, [[5], ALL_S]),
    ([FIRST, SECOND], 0, F + S, [ALL_F, ALL_S]),
    # three buffers, first and second
    ([FIRST, SECOND, THIRD], F - 1, F + 1, [[5], [6]]),
    ([FIRST, SECOND, THIRD], 0, 1 + F, [ALL_F, [6]]),
    ([FIRST, SECOND, THIRD], F - 1, F + S, [[5], ALL_S]),
    # three buffers, second and third
    ([FIRST, SECOND, THIRD], F + S - 1, F + S + 1, [[8], [9]]),
    ([FIRST, SECOND, THIRD], F, F + S + 1, [ALL_S, [9]]),
    ([FIRST, SECOND, THIRD], F + S - 1, F + S + T, [[8], ALL_T]),
    ([FIRST, SECOND, THIRD], F, F + S + T, [ALL_S, ALL_T]),
    # three buffers, all of them
    ([FIRST, SECOND, THIRD], F - 1, F + S + 1, [[5], ALL_S, [9]]),
    ([FIRST, SECOND, THIRD], 0, F + S + 1, [ALL_F, ALL_S, [9]]),
    ([FIRST, SECOND, THIRD], F - 1, F + S + T, [[5], ALL_S, ALL_T]),
    ([FIRST, SECOND, THIRD], 0, F + S + T, [ALL_F, ALL_S, ALL_T]),
]


@pytest.mark.parametrize("buffers, start, stop, expected", CASES)
def test_iteration_follows_range(buffers, start, stop, expected):
    piece, _ = make_slice(buffers, start, stop)
    check_content(piece, expected)
    check_content(piece, expected)


def test_write_all_three_buffers():
    piece, _ = make_slice([FIRST, SECOND, THIRD], 0, F + S + T)
    iterator = iter(piece)

    first = next(iterator)
    assert bytes(first) == bytes(ALL_F)
    first[:] = bytes(b + 1 for b in first)

    second = next(iterator)
    assert bytes(second) == bytes(ALL_S)
    second[:] = bytes(b + 2 for b in second)

    third = next(iterator)
    assert bytes(third) == bytes(ALL_T)
    third[:] = bytes(b + 3 for b in third)

    assert next(iterator, None) is None
    check_content(piece, [[2, 3, 4, 5, 6], [8, 9, 10], [12, 13, 14]])


def test_release_zeroes_and_returns_buffers():
    piece, released = make_slice([FIRST, SECOND], 0, F + S)
    piece.release()
    assert [bytes(b) for b in released] == [bytes(F), bytes(S)]
    assert list(piece) == []
    piece.release()
    assert len(released) == 2


def test_context_manager_releases():
    released = []
    with Slice([bytearray(FIRST)], 0, F, released.append) as piece:
        assert bytes(next(iter(piece))) == FIRST
    assert released == [bytearray(F)]


def test_invalid_ranges_rejected():
    with pytest.raises(ValueError):
        Slice([bytearray(FIRST)], 3, 2, lambda b: None)
    with pytest.raises(ValueError):
        Slice([bytearray(FIRST)], 0, F + 1, lambda b: None)
    with pytest.raises(ValueError):
        Slice([bytearray(FIRST), bytearray()], 0, 1, lambda b: None)


BUFFER_SIZE = 13
BUFFER_COUNT = 15


async def check_allocate(buffer_size, count, alloc_size):
    allocator = Allocator(buffer_size, count)
    piece = await allocator.allocate(alloc_size)

    verify = bytes((u + 1) % 256 for u in range(alloc_size))
    chunks = [verify[i:i + buffer_size] for i in range(0, alloc_size, buffer_size)]

    views = list(piece)
    assert [len(v) for v in views] == [len(c) for c in chunks]
    for view, chunk in zip(views, chunks):
        view[:] = chunk

    assert [bytes(v) for v in piece] == chunks

    piece.release()

    whole = await allocator.allocate(buffer_size * count)
    parts = list(whole)
    assert len(parts) == count
    assert all(not any(part) for part in parts)


@pytest.mark.asyncio
async def test_allocate_less_than_size():
    for alloc_size in range(1, BUFFER_SIZE):
        await check_allocate(BUFFER_SIZE, BUFFER_COUNT, alloc_size)


@pytest.mark.asyncio
async def test_allocate_size():
    await check_allocate(BUFFER_SIZE, BUFFER_COUNT, BUFFER_SIZE)


@pytest.mark.asyncio
async def test_allocate_more_than_size():
    for alloc_size in range(BUFFER_SIZE, BUFFER_SIZE * BUFFER_COUNT):
        await check_allocate(BUFFER_SIZE, BUFFER_COUNT, alloc_size)


@pytest.mark.asyncio
async def test_allocate_capacity():
    await check_allocate(BUFFER_SIZE, BUFFER_COUNT, BUFFER_SIZE * BUFFER_COUNT)


@pytest.mark.asyncio
async def test_reclaiming():
    allocator = Allocator(BUFFER_SIZE, BUFFER_COUNT)
    capacity = BUFFER_SIZE * BUFFER_COUNT

    for _ in range(5):
        piece = await allocator.allocate(capacity)
        parts = list(piece)
        assert len(parts) == BUFFER_COUNT
        assert all(not any(part) for part in parts)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(allocator.allocate(1), 0.12)

        piece.release()

        piece = await allocator.allocate(capacity)
        parts = list(piece)
        assert len(parts) == BUFFER_COUNT
        assert all(not any(part) for part in parts)
        piece.release()


@pytest.mark.asyncio
async def test_allocate_more_than_capacity_returns_none():
    allocator = Allocator(BUFFER_SIZE, BUFFER_COUNT)
    assert allocator.capacity() == BUFFER_SIZE * BUFFER_COUNT
    assert await allocator.allocate(BUFFER_SIZE * BUFFER_COUNT + 1) is None


@pytest.mark.asyncio
async def test_allocate_zero_rejected():
    allocator = Allocator(BUFFER_SIZE, BUFFER_COUNT)
    with pytest.raises(ValueError):
        await allocator.allocate(0)


def test_allocator_requires_positive_dimensions():
    with pytest.raises(ValueError):
        Allocator(0, 1)
    with pytest.raises(ValueError):
        Allocator(1, 0)