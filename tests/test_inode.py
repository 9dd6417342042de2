"""
iNode表与权限单元测试
"""

import pytest

from errors import ErrorKind
from filesystem import (DIRECT_BLOCKS, FileType, InodeTable, parse_permission_string,
                        validate_permission_input)
from users import ADMIN_ID, UserRegistry


@pytest.fixture
def table():
    return InodeTable()


@pytest.fixture
def users():
    reg = UserRegistry()
    reg.create_admin('1234')
    reg.add_user(ADMIN_ID, 'alice', 'secret')
    reg.add_user(ADMIN_ID, 'bob', 'hunter2')
    return reg


def test_ids_strictly_increasing(table):
    ids = [table.create(0, FileType.FILE, 0).inode_id for _ in range(5)]
    assert ids == [0, 1, 2, 3, 4]


def test_new_inode_defaults(table):
    inode = table.create(3, FileType.DIRECTORY, 128)
    assert inode.owner_id == 3
    assert inode.file_type == FileType.DIRECTORY
    assert inode.size == 128
    assert inode.permission_string() == 'rwxr-xr--'
    assert inode.block_addresses == [None] * DIRECT_BLOCKS
    assert inode.indirection_address is None
    assert inode.creation_time == inode.last_access_time == inode.last_update_time


@pytest.mark.parametrize('general_write', [True, False])
@pytest.mark.parametrize('user_id', [0, 1, 2, 99])
def test_write_permission_truth_table(table, general_write, user_id):
    inode = table.create(1, FileType.FILE, 0)
    inode.permissions['general'].write = general_write
    expected = general_write or user_id == 1
    assert inode.has_write_permission(user_id) is expected


def test_group_bits_are_never_consulted(table):
    inode = table.create(1, FileType.FILE, 0)
    inode.permissions['group'].write = True
    inode.permissions['group'].read = True
    inode.permissions['general'].read = False
    assert not inode.has_write_permission(2)
    assert not inode.has_read_permission(2)


def test_read_permission_owner_or_general(table):
    inode = table.create(1, FileType.FILE, 0)
    assert inode.has_read_permission(2)
    inode.permissions['general'].read = False
    assert inode.has_read_permission(1)
    assert not inode.has_read_permission(2)


def test_admin_sets_permissions_without_password(table, users):
    inode = table.create(1, FileType.FILE, 0)
    result = table.set_permissions(inode, 'general', True, True, False,
                                   requester_id=ADMIN_ID, password='', users=users)
    assert result.ok
    assert inode.permissions['general'].to_string() == 'rw-'


def test_owner_sets_permissions_with_own_password(table, users):
    inode = table.create(1, FileType.FILE, 0)
    result = table.set_permissions(inode, 'user', False, False, False,
                                   requester_id=1, password='secret', users=users)
    assert result.ok
    assert inode.permission_string() == '---r-xr--'


def test_owner_with_wrong_password_fails_authentication(table, users):
    inode = table.create(1, FileType.FILE, 0)
    result = table.set_permissions(inode, 'general', True, True, True,
                                   requester_id=1, password='nope', users=users)
    assert result.error == ErrorKind.AUTHENTICATION_FAILED
    assert inode.permissions['general'].to_string() == 'r--'


def test_non_owner_with_correct_password_is_denied(table, users):
    inode = table.create(1, FileType.DIRECTORY, 128)
    result = table.set_permissions(inode, 'general', True, True, True,
                                   requester_id=2, password='hunter2', users=users)
    assert result.error == ErrorKind.PERMISSION_DENIED
    assert inode.permissions['general'].to_string() == 'r--'


def test_unknown_permission_group(table, users):
    inode = table.create(0, FileType.FILE, 0)
    result = table.set_permissions(inode, 'others', True, True, True,
                                   requester_id=ADMIN_ID, password='', users=users)
    assert result.error == ErrorKind.INVALID_FORMAT


def test_change_owner_by_owner_accepts_unknown_user(table):
    inode = table.create(1, FileType.FILE, 0)
    result = table.change_owner(inode, 99, requester_id=1)
    assert result.ok
    assert inode.owner_id == 99


def test_change_owner_requires_admin_or_owner(table):
    inode = table.create(1, FileType.FILE, 0)
    assert table.change_owner(inode, 2, requester_id=2).error == ErrorKind.PERMISSION_DENIED
    assert inode.owner_id == 1
    assert table.change_owner(inode, 2, requester_id=ADMIN_ID).ok
    assert inode.owner_id == 2


@pytest.mark.parametrize('text, expected', [
    ('rwx', (True, True, True)),
    ('xr', (True, False, True)),
    ('w', (False, True, False)),
    ('', (False, False, False)),
    ('rrw', (True, True, False)),
])
def test_parse_permission_string(text, expected):
    assert parse_permission_string(text) == expected


@pytest.mark.parametrize('text', ['rwz', 'RWX', 'r w', '7', 'rw-'])
def test_invalid_permission_strings(text):
    assert not validate_permission_input(text)
    assert parse_permission_string(text) is None
