# vim: set noexpandtab: -*- indent-tabs-mode: t -*-

import pytest

from flatscope.export.intern import StringPool


def test_interning_returns_the_stored_object() -> None:
	pool = StringPool()
	first = pool.intern("".join(["game.", "Monster"]))
	second = pool.intern("".join(["game.", "Mon", "ster"]))
	assert first == second
	assert first is second
	assert len(pool) == 1
	assert "game.Monster" in pool


def test_join_docs() -> None:
	pool = StringPool()
	assert pool.join([" first", " second"]) == " first\n second"
	assert pool.join([]) == ""
	assert len(pool) == 2


def test_release_drops_everything() -> None:
	pool = StringPool()
	pool.intern("x")
	pool.release()
	assert pool.released
	assert len(pool) == 0
	assert "x" not in pool
	with pytest.raises(RuntimeError):
		pool.intern("x")
