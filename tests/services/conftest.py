import pytest_asyncio

from hkjobs.main.client import JobBoardClient
from tests.factories.token_factory import make_tokens


@pytest_asyncio.fixture
async def client(board: JobBoardClient) -> JobBoardClient:
    await board.session.set_tokens(make_tokens(1))
    return board
