"""
虚拟磁盘(块存储)单元测试
"""

from dataclasses import dataclass

import time

import pytest

from errors import ErrorKind
from filesystem import BLOCK_SIZE, MAX_DISK_SIZE, MIN_DISK_SIZE, VirtualDisk

from conftest import make_fs


@dataclass
class Snapshot:
    name: str

    def to_dict(self):
        return {'name': self.name}


@pytest.mark.parametrize('size', [MIN_DISK_SIZE, 1000, 1024, 5000, MAX_DISK_SIZE])
def test_initialize_block_count(size):
    """测试1: 块数 = floor(size / 512)，全部空闲"""
    result = VirtualDisk.initialize(size)
    assert result.ok
    disk = result.value
    assert disk.block_count == size // BLOCK_SIZE
    assert disk.free_count() == disk.block_count
    assert disk.used_count() == 0


@pytest.mark.parametrize('size', [0, 511, MAX_DISK_SIZE + 1, -512])
def test_initialize_rejects_out_of_range(size):
    result = VirtualDisk.initialize(size)
    assert result.error == ErrorKind.INVALID_FORMAT
    assert result.value is None


def test_allocate_uses_first_free_block():
    disk = VirtualDisk(4)
    assert disk.allocate(Snapshot('a')).value == 0
    assert disk.allocate(Snapshot('b')).value == 1
    assert not disk.is_free(0)
    assert disk.is_free(2)
    assert len(disk.blocks[0]) == BLOCK_SIZE
    assert disk.blocks[0].rstrip(b'\x00') == b'{"name": "a"}'


def test_allocate_skips_blocks_written_after_cursor():
    """测试2: 游标之后被占用的块同样会被跳过"""
    disk = VirtualDisk(4)
    disk.blocks[1] = VirtualDisk.serialize(Snapshot('x'))
    assert disk.allocate(Snapshot('a')).value == 0
    assert disk.allocate(Snapshot('b')).value == 2
    assert disk.allocate(Snapshot('c')).value == 3
    assert disk.allocate(Snapshot('d')).error == ErrorKind.OUT_OF_SPACE


def test_allocate_on_full_disk():
    disk = VirtualDisk(1)
    assert disk.allocate(Snapshot('a')).ok
    result = disk.allocate(Snapshot('b'))
    assert result.error == ErrorKind.OUT_OF_SPACE
    assert disk.used_count() == 1


def test_serialize_truncates_to_one_block():
    data = VirtualDisk.serialize(Snapshot('x' * 2000))
    assert len(data) == BLOCK_SIZE


def test_capacity_queries():
    disk = VirtualDisk(8)
    for i in range(3):
        disk.allocate(Snapshot(str(i)))
    assert disk.free_count() == 5
    assert disk.used_count() == 3
    assert disk.total_bytes() == 8 * BLOCK_SIZE
    assert disk.free_bytes() == 5 * BLOCK_SIZE
    assert disk.get_block_status() == [True] * 3 + [False] * 5


def test_root_directory_occupies_first_block():
    fs = make_fs(2048)
    assert fs.disk.used_count() == 1
    assert not fs.disk.is_free(0)
    assert fs.root.inode.inode_id == 0
    assert fs.root.inode.owner_id == 0
    assert fs.root.inode.size == 512


def test_disk_info(fs):
    info = fs.get_disk_info()
    assert info == {
        'total_bytes': 8192,
        'free_bytes': 15 * BLOCK_SIZE,
        'total_blocks': 16,
        'free_blocks': 15,
        'used_blocks': 1,
        'block_size': BLOCK_SIZE,
    }


def test_large_file_on_max_disk():
    """测试3: 最大磁盘上创建8MB文件，分配按顺序完成且不会卡住"""
    fs = make_fs(MAX_DISK_SIZE)
    assert fs.make_directory('docs').ok
    start = time.perf_counter()
    result = fs.create_file('big', 8 * 1024 * 1024, 'docs')
    elapsed = time.perf_counter() - start
    assert result.ok
    assert elapsed < 5
    total = MAX_DISK_SIZE // BLOCK_SIZE
    assert fs.disk.free_count() == total - 2 - 16384
    assert fs.disk.get_block_status()[:16386] == [True] * 16386
    assert fs.disk.is_free(16386)
