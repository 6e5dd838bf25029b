from sqlalchemy.pool import StaticPool

from om_intel.db.session import build_engine, get_session


def test_session_dependency():
    gen = get_session()
    session = next(gen)
    assert session is not None
    session.close()


def test_in_memory_sqlite_shares_one_connection():
    engine = build_engine("sqlite://")
    assert isinstance(engine.pool, StaticPool)


def test_file_sqlite_uses_default_pool(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'chat.db'}")
    assert not isinstance(engine.pool, StaticPool)
