"""
Unix风格文件系统模拟器 - 文件系统模块
功能：模拟磁盘(512B块)、iNode表、权限与所有权、单层目录树、文件内容存储
"""

import json
from datetime import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union
from enum import Enum

from errors import ErrorKind, OpResult
from logger import logger
from users import ADMIN_ID, UserRegistry

# ==================== 常量定义 ====================
BLOCK_SIZE = 512                  # 每个盘块大小 512B
MIN_DISK_SIZE = 512               # 最小磁盘 1块
MAX_DISK_SIZE = 33554432          # 最大磁盘 32MB = 65536块

DIRECT_BLOCKS = 10                # 直接索引数(保留，不填充)
ROOT_NAME = "/"
ROOT_INODE_SIZE = 512
DIRECTORY_INODE_SIZE = 128
DEFAULT_ADMIN_PASSWORD = "1234"

PERMISSION_GROUPS = ("user", "group", "general")
PERMISSION_CHARS = "rwx"
EMPTY_BLOCK = bytes(BLOCK_SIZE)


class FileType(Enum):
    DIRECTORY = "directory"
    FILE = "file"


# ==================== 权限 ====================

@dataclass
class PermissionBits:
    """一个权限组的 rwx 三位"""
    read: bool = False
    write: bool = False
    execute: bool = False

    def to_string(self) -> str:
        return (f"{'r' if self.read else '-'}"
                f"{'w' if self.write else '-'}"
                f"{'x' if self.execute else '-'}")

    def to_dict(self) -> Dict[str, bool]:
        return {'read': self.read, 'write': self.write, 'execute': self.execute}


def default_permissions() -> Dict[str, PermissionBits]:
    """默认权限: user=rwx, group=r-x, general=r--"""
    return {
        'user': PermissionBits(True, True, True),
        'group': PermissionBits(True, False, True),
        'general': PermissionBits(True, False, False),
    }


def validate_permission_input(permission: str) -> bool:
    """权限字符串只能包含 r/w/x，顺序和组合任意"""
    return all(ch in PERMISSION_CHARS for ch in permission)


def parse_permission_string(permission: str) -> Optional[Tuple[bool, bool, bool]]:
    """'rw' -> (True, True, False)；非法格式返回None"""
    if not validate_permission_input(permission):
        return None
    return 'r' in permission, 'w' in permission, 'x' in permission


# ==================== iNode ====================

@dataclass
class Inode:
    """iNode节点 - 描述所有者、类型、大小、时间戳与权限"""
    inode_id: int
    owner_id: int
    file_type: FileType
    size: int = 0
    creation_time: datetime = field(default_factory=datetime.now)
    last_access_time: datetime = field(default_factory=datetime.now)
    last_update_time: datetime = field(default_factory=datetime.now)
    permissions: Dict[str, PermissionBits] = field(default_factory=default_permissions)
    block_addresses: List[Optional[int]] = field(default_factory=lambda: [None] * DIRECT_BLOCKS)
    indirection_address: Optional[int] = None

    def has_write_permission(self, user_id: int) -> bool:
        """general写权限对所有人生效，否则只有所有者可写；group位不参与判断"""
        if self.permissions['general'].write:
            return True
        return user_id == self.owner_id

    def has_read_permission(self, user_id: int) -> bool:
        return user_id == self.owner_id or self.permissions['general'].read

    def change_owner(self, user_id: int):
        self.owner_id = user_id

    def touch_access(self):
        self.last_access_time = datetime.now()

    def touch_update(self):
        self.last_update_time = datetime.now()

    def permission_string(self) -> str:
        """例如 rwxr-xr--"""
        return ''.join(self.permissions[g].to_string() for g in PERMISSION_GROUPS)

    def get_info(self) -> Dict[str, Any]:
        """iNode信息，用于 ls -i 与序列化"""
        return {
            'id': self.inode_id,
            'ownerId': self.owner_id,
            'fileType': self.file_type.value,
            'size': self.size,
            'creationTime': self.creation_time.strftime('%Y-%m-%d %H:%M:%S'),
            'lastAccessTime': self.last_access_time.strftime('%Y-%m-%d %H:%M:%S'),
            'lastUpdateTime': self.last_update_time.strftime('%Y-%m-%d %H:%M:%S'),
            'permissions': {g: self.permissions[g].to_dict() for g in PERMISSION_GROUPS},
        }


class InodeTable:
    """iNode表 - 发放整个进程生命周期内唯一且递增的iNode编号"""

    def __init__(self):
        self.next_id = 0

    def create(self, owner_id: int, file_type: FileType, size: int) -> Inode:
        """分配新iNode，三个时间戳均为当前时间"""
        now = datetime.now()
        inode = Inode(inode_id=self.next_id, owner_id=owner_id, file_type=file_type,
                      size=size, creation_time=now, last_access_time=now,
                      last_update_time=now)
        self.next_id += 1
        logger.debug(f"分配iNode {inode.inode_id} ({file_type.value}, owner={owner_id})")
        return inode

    @staticmethod
    def authorize_permission_change(inode: Inode, requester_id: int, password: str,
                                    users: UserRegistry) -> OpResult:
        """
        管理员直接放行；否则请求者必须是所有者，且提供自己的正确密码
        先判断所有权，再判断密码
        """
        if requester_id == ADMIN_ID:
            return OpResult.success()
        if inode.owner_id != requester_id:
            return OpResult.failure(ErrorKind.PERMISSION_DENIED,
                                    "Insufficient permissions. Permission change failed.")
        if not users.authenticate(requester_id, password):
            return OpResult.failure(ErrorKind.AUTHENTICATION_FAILED,
                                    "Incorrect password. Permission change failed.")
        return OpResult.success()

    def set_permissions(self, inode: Inode, group: str, read: bool, write: bool,
                        execute: bool, requester_id: int, password: str,
                        users: UserRegistry) -> OpResult:
        """一次性覆盖某个权限组的三位"""
        result = self.authorize_permission_change(inode, requester_id, password, users)
        if not result.ok:
            logger.warning(f"用户 {requester_id} 修改iNode {inode.inode_id} 权限被拒绝")
            return result
        if group not in PERMISSION_GROUPS:
            return OpResult.failure(ErrorKind.INVALID_FORMAT,
                                    'Invalid permission group. Please enter "user", "group", or "general".')

        inode.permissions[group] = PermissionBits(read, write, execute)
        inode.touch_update()
        logger.info(f"iNode {inode.inode_id} 的 {group} 权限改为 "
                    f"{inode.permissions[group].to_string()}")
        return OpResult.success(value=inode)

    def change_owner(self, inode: Inode, new_owner_id: int, requester_id: int) -> OpResult:
        """管理员或当前所有者可以转移所有权；新所有者id不做存在性校验"""
        if requester_id != ADMIN_ID and requester_id != inode.owner_id:
            logger.warning(f"用户 {requester_id} 修改iNode {inode.inode_id} 所有者被拒绝")
            return OpResult.failure(ErrorKind.PERMISSION_DENIED,
                                    "You do not have permission to change the userId for this file/directory.")

        inode.change_owner(new_owner_id)
        inode.touch_update()
        logger.info(f"iNode {inode.inode_id} 所有者改为 {new_owner_id}")
        return OpResult.success(value=inode)


# ==================== 目录与文件 ====================

@dataclass
class File:
    """文件 - 只有名称与iNode，内容存放在 FileContentStore"""
    name: str
    inode: Inode
    block_count: int = 0           # 创建时占用的块数，写入内容后不变

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'inode': self.inode.get_info()}


@dataclass
class Directory:
    """目录 - 名称、iNode、子目录表与文件表"""
    name: str
    inode: Inode
    subdirectories: Dict[str, 'Directory'] = field(default_factory=dict)
    files: Dict[str, File] = field(default_factory=dict)

    def add_file(self, file: File):
        self.files[file.name] = file

    def add_subdirectory(self, subdirectory: 'Directory'):
        self.subdirectories[subdirectory.name] = subdirectory

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'inode': self.inode.get_info(),
            'subdirectories': list(self.subdirectories),
            'files': list(self.files),
        }


Entry = Union[Directory, File]


# ==================== 虚拟磁盘类 ====================

class VirtualDisk:
    """
    虚拟磁盘 - 固定数量的512B块
    块的状态由内容推导：全部为0即空闲
    分配只用于容量统计，块不会反向映射到对象
    """

    def __init__(self, block_count: int):
        self.blocks: List[bytes] = [EMPTY_BLOCK] * block_count
        # 块只分配不回收，第一个空闲块的位置只会向后移动
        self.first_free = 0

    @classmethod
    def initialize(cls, total_bytes: int) -> OpResult:
        """按字节数创建磁盘，块数 = floor(total_bytes / 512)"""
        if total_bytes < MIN_DISK_SIZE or total_bytes > MAX_DISK_SIZE:
            return OpResult.failure(
                ErrorKind.INVALID_FORMAT,
                f"Disk size must be between {MIN_DISK_SIZE} and {MAX_DISK_SIZE} bytes.")
        disk = cls(total_bytes // BLOCK_SIZE)
        logger.info(f"磁盘创建完成，总块数: {disk.block_count}")
        return OpResult.success(value=disk)

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    def is_free(self, block_num: int) -> bool:
        """检查块是否空闲"""
        return self.blocks[block_num] == EMPTY_BLOCK

    @staticmethod
    def serialize(obj) -> bytes:
        """对象快照 -> JSON字节，截断/补齐到一个块"""
        data = json.dumps(obj.to_dict(), default=str).encode('utf-8')
        return data[:BLOCK_SIZE].ljust(BLOCK_SIZE, b'\x00')

    def allocate(self, obj) -> OpResult:
        """从第一个空闲块开始线性扫描，把对象快照写入第一个空闲块"""
        for i in range(self.first_free, self.block_count):
            if self.is_free(i):
                self.blocks[i] = self.serialize(obj)
                self.first_free = i + 1
                logger.debug(f"分配块: {i}")
                return OpResult.success(value=i)
        self.first_free = self.block_count
        logger.warning("无空闲块")
        return OpResult.failure(ErrorKind.OUT_OF_SPACE, "Not enough space on the disk.")

    def free_count(self) -> int:
        """返回空闲块数量"""
        return self.blocks.count(EMPTY_BLOCK)

    def used_count(self) -> int:
        return self.block_count - self.free_count()

    def total_bytes(self) -> int:
        return self.block_count * BLOCK_SIZE

    def free_bytes(self) -> int:
        return self.free_count() * BLOCK_SIZE

    def get_block_status(self) -> List[bool]:
        """获取块状态列表，True表示已使用，用于可视化"""
        return [not self.is_free(i) for i in range(self.block_count)]


# ==================== 目录树 ====================

class NamespaceTree:
    """
    目录树 - 根目录 / 下只有一层子目录，文件只能放在子目录中
    名称不带路径，查找按先序遍历取第一个匹配项
    """

    def __init__(self, inodes: InodeTable, disk: VirtualDisk):
        self.inodes = inodes
        self.disk = disk
        root_inode = self.inodes.create(ADMIN_ID, FileType.DIRECTORY, ROOT_INODE_SIZE)
        self.root = Directory(ROOT_NAME, root_inode)
        # 根目录元数据占用第一个块
        self.disk.allocate(self.root)

    def resolve(self, name: str, directory: Optional[Directory] = None) -> Optional[Entry]:
        """
        先序深度优先查找：目录自身 -> 其文件 -> 按插入顺序递归子目录
        同名条目只返回遍历中最先遇到的那个
        """
        if directory is None:
            directory = self.root

        if directory.name == name:
            return directory

        if name in directory.files:
            return directory.files[name]

        for subdirectory in directory.subdirectories.values():
            result = self.resolve(name, subdirectory)
            if result is not None:
                return result

        return None

    def create_subdirectory(self, name: str, owner_id: int) -> OpResult:
        """在根目录下创建子目录，同名时覆盖旧目录"""
        if self.disk.free_count() < 1:
            return OpResult.failure(ErrorKind.OUT_OF_SPACE,
                                    "Not enough space on the disk to create the directory.")

        inode = self.inodes.create(owner_id, FileType.DIRECTORY, DIRECTORY_INODE_SIZE)
        directory = Directory(name, inode)
        self.root.add_subdirectory(directory)
        self.disk.allocate(directory)
        logger.info(f"目录 '{name}' 已创建 (inode={inode.inode_id})")
        return OpResult.success(f'Directory "{name}" created successfully.', directory)

    def remove_subdirectory(self, name: str, requester_id: int) -> OpResult:
        """删除根目录下的子目录及其中文件，不回收磁盘块"""
        if name == ROOT_NAME:
            return OpResult.failure(ErrorKind.INVALID_OPERATION,
                                    "Cannot remove the root directory.")

        target = self.root.subdirectories.get(name)
        if target is None:
            return OpResult.failure(ErrorKind.NOT_FOUND,
                                    f'Directory "{name}" not found or is not a directory.')

        if requester_id != ADMIN_ID and not target.inode.permissions['general'].write:
            logger.warning(f"用户 {requester_id} 删除目录 '{name}' 被拒绝")
            return OpResult.failure(ErrorKind.PERMISSION_DENIED,
                                    "You do not have permission to remove this directory.")

        del self.root.subdirectories[name]
        logger.info(f"目录 '{name}' 已删除，丢弃 {len(target.files)} 个文件")
        return OpResult.success(f'Directory "{name}" removed successfully.', target)

    def create_file(self, name: str, size_bytes: int, parent_name: str,
                    owner_id: int) -> OpResult:
        """
        创建文件
        大小向上取整到512的倍数；先检查整个磁盘的空闲块是否足够，
        空间不足时不分配任何块
        """
        if size_bytes < 0:
            return OpResult.failure(ErrorKind.INVALID_FORMAT,
                                    "File size must be a non-negative number of bytes.")

        num_blocks = (size_bytes + BLOCK_SIZE - 1) // BLOCK_SIZE
        required_space = num_blocks * BLOCK_SIZE
        if required_space > self.disk.free_bytes():
            logger.warning(f"创建文件 '{name}' 需要 {num_blocks} 块，空间不足")
            return OpResult.failure(ErrorKind.OUT_OF_SPACE,
                                    "Not enough space on the disk to create the file.")

        parent = self.root.subdirectories.get(parent_name)
        if parent is None:
            return OpResult.failure(
                ErrorKind.NOT_FOUND,
                f'Directory "{parent_name}" not found or tried to write to root.')

        inode = self.inodes.create(owner_id, FileType.FILE, required_space)
        new_file = File(name, inode, num_blocks)
        parent.add_file(new_file)
        for _ in range(num_blocks):
            self.disk.allocate(new_file)

        logger.info(f"文件 '{name}' 已创建于 '{parent_name}'，占用 {num_blocks} 块")
        return OpResult.success(
            f'File "{name}" inserted successfully into the directory "{parent_name}".',
            new_file)

    def remove_file(self, parent_name: str, file_name: str) -> OpResult:
        """从子目录中删除文件，不回收磁盘块"""
        parent = self.root.subdirectories.get(parent_name)
        if parent is None:
            return OpResult.failure(ErrorKind.NOT_FOUND,
                                    f'Directory "{parent_name}" not found.')
        if file_name not in parent.files:
            return OpResult.failure(
                ErrorKind.NOT_FOUND,
                f'File "{file_name}" not found in directory "{parent_name}".')

        removed = parent.files.pop(file_name)
        logger.info(f"文件 '{file_name}' 已从 '{parent_name}' 删除")
        return OpResult.success(
            f'File "{file_name}" removed successfully from directory "{parent_name}".',
            removed)

    def reset(self):
        """清空根目录的子目录和文件(mkfs)，磁盘块不回收"""
        self.root.subdirectories = {}
        self.root.files = {}
        logger.info("根目录已重置")

    def list_tree(self, directory: Optional[Directory] = None, indent: str = '') -> List[str]:
        """树形列表：先子目录，后文件"""
        if directory is None:
            directory = self.root

        lines = [f"{indent}D - {directory.name} - (inode: {directory.inode.inode_id})"]
        for subdirectory in directory.subdirectories.values():
            lines.extend(self.list_tree(subdirectory, f"{indent}|   "))
        for file in directory.files.values():
            lines.append(f"{indent}|   |-- F - {file.name} - (inode: {file.inode.inode_id})")
        return lines


# ==================== 文件内容存储 ====================

@dataclass
class FileContent:
    """一条写入记录"""
    file_name: str
    content: str = ''


class FileContentStore:
    """
    文件内容存储 - 只按文件名索引(全局命名空间)
    写入总是追加新记录，读取返回最早的那条
    """

    def __init__(self):
        self.records: List[FileContent] = []

    def write(self, file_name: str, content: str):
        self.records.append(FileContent(file_name, content))

    def read(self, file_name: str) -> Optional[str]:
        for record in self.records:
            if record.file_name == file_name:
                return record.content
        return None


# ==================== 文件系统类 ====================

class FileSystem:
    """
    文件系统状态聚合 - 用户、iNode、磁盘、目录树、文件内容
    所有操作以当前会话用户的身份执行
    """

    def __init__(self, disk: VirtualDisk, admin_password: str = DEFAULT_ADMIN_PASSWORD):
        self.disk = disk
        self.users = UserRegistry()
        self.inodes = InodeTable()
        self.tree = NamespaceTree(self.inodes, self.disk)
        self.contents = FileContentStore()
        self.users.create_admin(admin_password or DEFAULT_ADMIN_PASSWORD)

    @classmethod
    def create_disk(cls, size_bytes: int = MAX_DISK_SIZE,
                    admin_password: str = '') -> OpResult:
        """创建磁盘并初始化文件系统，空密码使用默认密码 1234"""
        result = VirtualDisk.initialize(size_bytes)
        if not result.ok:
            return result
        # 空白密码只用于判断是否使用默认值，原样保存
        password = admin_password if admin_password.strip() else DEFAULT_ADMIN_PASSWORD
        fs = cls(result.value, password)
        return OpResult.success(
            f"Disk created: {fs.disk.total_bytes()} bytes, {fs.disk.block_count} blocks.", fs)

    @property
    def root(self) -> Directory:
        return self.tree.root

    @property
    def active_user_id(self) -> int:
        return self.users.active_user_id

    # ==================== 用户操作 ====================

    def add_user(self, username: str, password: str) -> OpResult:
        return self.users.add_user(self.active_user_id, username, password)

    def remove_user(self, user_id: int) -> OpResult:
        return self.users.remove_user(self.active_user_id, user_id)

    def switch_user(self, user_id: int, password: str) -> OpResult:
        return self.users.switch_active_user(user_id, password)

    # ==================== 目录与文件操作 ====================

    def make_directory(self, name: str) -> OpResult:
        return self.tree.create_subdirectory(name, self.active_user_id)

    def remove_directory(self, name: str) -> OpResult:
        return self.tree.remove_subdirectory(name, self.active_user_id)

    def create_file(self, name: str, size_bytes: int, parent_name: str) -> OpResult:
        return self.tree.create_file(name, size_bytes, parent_name, self.active_user_id)

    def remove_file(self, parent_name: str, file_name: str) -> OpResult:
        return self.tree.remove_file(parent_name, file_name)

    def reset_root(self) -> OpResult:
        self.tree.reset()
        return OpResult.success("Root directory reset successfully.")

    def change_permissions(self, name: str, group: str, permission: str,
                           password: str = '') -> OpResult:
        """chmod：先验证身份，再依次校验权限组与权限字符串"""
        target = self.tree.resolve(name)
        if target is None:
            return OpResult.failure(ErrorKind.NOT_FOUND, f'Directory "{name}" not found.')

        auth = self.inodes.authorize_permission_change(
            target.inode, self.active_user_id, password, self.users)
        if not auth.ok:
            logger.warning(f"用户 {self.active_user_id} 修改 '{name}' 权限被拒绝")
            return auth

        if group not in PERMISSION_GROUPS:
            return OpResult.failure(ErrorKind.INVALID_FORMAT,
                                    'Invalid permission group. Please enter "user", "group", or "general".')
        bits = parse_permission_string(permission)
        if bits is None:
            return OpResult.failure(ErrorKind.INVALID_FORMAT,
                                    'Invalid permission format. Please use "r", "w", and "x".')

        result = self.inodes.set_permissions(target.inode, group, *bits,
                                             requester_id=self.active_user_id,
                                             password=password, users=self.users)
        if not result.ok:
            return result
        return OpResult.success(
            f'Permissions for {group} of "{name}" changed successfully.', target)

    def change_owner(self, name: str, new_owner_id: int) -> OpResult:
        target = self.tree.resolve(name)
        if target is None:
            return OpResult.failure(ErrorKind.NOT_FOUND,
                                    f'File or directory "{name}" not found.')

        result = self.inodes.change_owner(target.inode, new_owner_id, self.active_user_id)
        if not result.ok:
            return result
        return OpResult.success(f'UserId for "{name}" changed to {new_owner_id}.', target)

    def write_file(self, name: str, content: str) -> OpResult:
        """echo：追加一条内容记录，并把文件大小更新为内容字节数"""
        target = self.tree.resolve(name)
        if target is None:
            return OpResult.failure(ErrorKind.NOT_FOUND,
                                    f'File "{name}" not found or is not a file.')
        if isinstance(target, Directory):
            if target is self.root:
                return OpResult.failure(ErrorKind.INVALID_OPERATION,
                                        "Cannot write to the root directory.")
            return OpResult.failure(ErrorKind.INVALID_OPERATION,
                                    f'"{name}" is a directory, not a file.')

        if not target.inode.has_write_permission(self.active_user_id):
            logger.warning(f"用户 {self.active_user_id} 写入 '{name}' 被拒绝")
            return OpResult.failure(ErrorKind.PERMISSION_DENIED,
                                    "You do not have write permission for this file.")

        target.inode.size = len(content.encode('utf-8'))
        target.inode.touch_update()
        self.contents.write(name, content)
        logger.info(f"文件 '{name}' 写入 {target.inode.size} 字节")
        return OpResult.success(f'Content updated for file "{name}".', target)

    def read_file(self, name: str) -> OpResult:
        """cat：返回最早写入的内容；需要是所有者或具备general读权限"""
        content = self.contents.read(name)
        if content is None:
            return OpResult.failure(ErrorKind.NOT_FOUND, f'File "{name}" not found.')

        target = self.tree.resolve(name)
        if target is None:
            return OpResult.failure(ErrorKind.NOT_FOUND, f'File "{name}" not found.')

        if not target.inode.has_read_permission(self.active_user_id):
            logger.warning(f"用户 {self.active_user_id} 读取 '{name}' 被拒绝")
            return OpResult.failure(ErrorKind.PERMISSION_DENIED,
                                    "You do not have read permission for this file.")

        target.inode.touch_access()
        return OpResult.success(value=content)

    # ==================== 查询 ====================

    def list_directory(self, name: str) -> OpResult:
        """cd：列出目录自身及其直接子项"""
        target = self.tree.resolve(name)
        if not isinstance(target, Directory):
            return OpResult.failure(ErrorKind.NOT_FOUND, f'Directory "{name}" not found.')

        lines = [f"D - {target.name} (inode: {target.inode.inode_id})"]
        for subdirectory in target.subdirectories.values():
            lines.append(f"|   D - {subdirectory.name} (inode: {subdirectory.inode.inode_id})")
        for file in target.files.values():
            lines.append(f"|   F - {file.name} (inode: {file.inode.inode_id})")
        return OpResult.success(value=lines)

    def inode_info(self, name: str) -> OpResult:
        """ls -i：目标的iNode信息，目录还包含直接子项的iNode信息"""
        target = self.tree.resolve(name)
        if target is None:
            return OpResult.failure(ErrorKind.NOT_FOUND,
                                    f'Directory or File "{name}" not found.')

        info = {'name': target.name, 'inode': target.inode.get_info()}
        if isinstance(target, Directory):
            info['files'] = [f.to_dict() for f in target.files.values()]
            info['subdirectories'] = [
                {'name': d.name, 'inode': d.inode.get_info()}
                for d in target.subdirectories.values()
            ]
        return OpResult.success(value=info)

    def list_tree(self) -> List[str]:
        return self.tree.list_tree()

    def list_files(self) -> List[Dict]:
        """所有文件的摘要，用于可视化"""
        files = []
        for directory in self.root.subdirectories.values():
            for file in directory.files.values():
                files.append({
                    'name': file.name,
                    'parent': directory.name,
                    'size': file.inode.size,
                    'blocks': file.block_count,
                    'owner': file.inode.owner_id,
                    'permission': file.inode.permission_string(),
                    'create_time': file.inode.creation_time.strftime('%Y-%m-%d %H:%M:%S'),
                    'inode_id': file.inode.inode_id,
                })
        return files

    def get_disk_info(self) -> Dict:
        """获取磁盘信息"""
        return {
            'total_bytes': self.disk.total_bytes(),
            'free_bytes': self.disk.free_bytes(),
            'total_blocks': self.disk.block_count,
            'free_blocks': self.disk.free_count(),
            'used_blocks': self.disk.used_count(),
            'block_size': BLOCK_SIZE,
        }

    def get_bitmap_visual(self, cols: Optional[int] = None) -> List[List[Optional[bool]]]:
        """
        块使用情况网格，用于可视化
        默认接近正方形，末行不足部分用None填充
        """
        status = self.disk.get_block_status()
        if cols is None:
            cols = 1
            while cols * cols < len(status):
                cols += 1
        grid = []
        for start in range(0, len(status), cols):
            row: List[Optional[bool]] = list(status[start:start + cols])
            row.extend([None] * (cols - len(row)))
            grid.append(row)
        return grid
