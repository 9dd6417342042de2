"""
测试公共夹具
"""

import pytest

from filesystem import FileSystem
from main import FileSystemSimulator


def make_fs(size_bytes: int = 8192, admin_password: str = '') -> FileSystem:
    """创建指定大小的文件系统，默认16块"""
    result = FileSystem.create_disk(size_bytes, admin_password)
    assert result.ok, result.message
    return result.value


@pytest.fixture
def fs():
    return make_fs()


@pytest.fixture
def simulator(fs):
    return FileSystemSimulator(fs)


@pytest.fixture
def fs_with_alice(fs):
    """管理员之外再加一个普通用户 alice (id 1)"""
    assert fs.add_user('alice', 'secret').ok
    return fs
