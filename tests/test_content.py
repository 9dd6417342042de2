"""
文件内容存储与 echo/cat 权限单元测试
"""

import pytest

from errors import ErrorKind
from filesystem import FileContentStore


@pytest.fixture
def docs(fs_with_alice):
    fs = fs_with_alice
    fs.make_directory('docs')
    fs.create_file('a.txt', 10, 'docs')
    return fs


def test_store_first_write_wins():
    store = FileContentStore()
    store.write('f', 'x')
    store.write('f', 'y')
    assert store.read('f') == 'x'
    assert len(store.records) == 2
    assert store.read('missing') is None


def test_write_then_read_round_trip(docs):
    assert docs.write_file('a.txt', 'hi').ok
    assert docs.read_file('a.txt').value == 'hi'


def test_later_writes_do_not_replace_content(docs):
    docs.write_file('a.txt', 'x')
    docs.write_file('a.txt', 'y')
    assert docs.read_file('a.txt').value == 'x'


def test_write_updates_inode_size(docs):
    docs.write_file('a.txt', 'héllo')
    assert docs.tree.resolve('a.txt').inode.size == len('héllo'.encode('utf-8'))


def test_write_requires_permission(docs):
    docs.switch_user(1, 'secret')
    result = docs.write_file('a.txt', 'alice')
    assert result.error == ErrorKind.PERMISSION_DENIED
    assert docs.contents.records == []


def test_general_write_lets_anyone_write(docs):
    docs.change_permissions('a.txt', 'general', 'rw')
    docs.switch_user(1, 'secret')
    assert docs.write_file('a.txt', 'alice').ok


def test_write_to_directory_is_invalid(docs):
    assert docs.write_file('/', 'x').error == ErrorKind.INVALID_OPERATION
    assert docs.write_file('docs', 'x').error == ErrorKind.INVALID_OPERATION


def test_write_missing_file(docs):
    assert docs.write_file('ghost', 'x').error == ErrorKind.NOT_FOUND


def test_read_without_content(docs):
    assert docs.read_file('a.txt').error == ErrorKind.NOT_FOUND


def test_read_allowed_by_general_read(docs):
    docs.write_file('a.txt', 'public')
    docs.switch_user(1, 'secret')
    assert docs.read_file('a.txt').value == 'public'


def test_read_denied_without_general_read(docs):
    docs.write_file('a.txt', 'private')
    docs.change_permissions('a.txt', 'general', '')
    docs.switch_user(1, 'secret')
    assert docs.read_file('a.txt').error == ErrorKind.PERMISSION_DENIED


def test_owner_reads_without_general_read(docs):
    docs.write_file('a.txt', 'mine')
    docs.change_permissions('a.txt', 'general', '')
    assert docs.read_file('a.txt').value == 'mine'


def test_same_name_files_share_content(docs):
    docs.make_directory('other')
    docs.create_file('a.txt', 10, 'other')
    docs.write_file('a.txt', 'shared')
    assert docs.contents.read('a.txt') == 'shared'
    # 第二个同名文件的 iNode 没有被写入
    assert docs.root.subdirectories['other'].files['a.txt'].inode.size == 512
    assert docs.root.subdirectories['docs'].files['a.txt'].inode.size == 6


def test_content_survives_file_removal(docs):
    docs.write_file('a.txt', 'ghost data')
    docs.remove_file('docs', 'a.txt')
    assert docs.read_file('a.txt').error == ErrorKind.NOT_FOUND
    docs.create_file('a.txt', 10, 'docs')
    assert docs.read_file('a.txt').value == 'ghost data'
