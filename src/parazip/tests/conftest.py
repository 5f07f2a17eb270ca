import pytest


@pytest.fixture
def sample_tree(tmp_path):
    """创建一个包含嵌套目录的示例目录树"""
    root = tmp_path / "data"
    (root / "sub" / "deep").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"alpha")
    (root / "sub" / "b.bin").write_bytes(bytes(range(256)) * 8)
    (root / "sub" / "deep" / "c.txt").write_text("gamma\n" * 100, encoding="utf-8")
    (root / "empty.txt").write_bytes(b"")
    return root
