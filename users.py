"""
Unix风格文件系统模拟器 - 用户管理模块
功能：用户注册表、管理员账户、当前会话用户切换
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from errors import ErrorKind, OpResult
from logger import logger

ADMIN_ID = 0
ADMIN_USERNAME = "admin"


@dataclass(frozen=True)
class User:
    """用户 - 创建后不可修改"""
    id: int
    username: str
    password: str


class UserRegistry:
    """用户注册表 - 保存所有用户及当前活动会话"""

    def __init__(self):
        self.users: Dict[int, User] = {}
        self.next_user_id = ADMIN_ID
        self.active_user_id = ADMIN_ID

    def _issue_id(self) -> int:
        user_id = self.next_user_id
        self.next_user_id += 1
        return user_id

    def create_admin(self, password: str) -> User:
        """创建管理员(id 0)，每个会话只能在创建磁盘时调用一次"""
        if ADMIN_ID in self.users or self.next_user_id != ADMIN_ID:
            raise RuntimeError("admin user already exists")

        admin = User(self._issue_id(), ADMIN_USERNAME, password)
        self.users[admin.id] = admin
        self.active_user_id = admin.id
        logger.info(f"管理员账户已创建 (id={admin.id})")
        return admin

    def add_user(self, requester_id: int, username: str, password: str) -> OpResult:
        """添加新用户，只有管理员可以操作"""
        if requester_id != ADMIN_ID:
            logger.warning(f"用户 {requester_id} 尝试添加用户被拒绝")
            return OpResult.failure(ErrorKind.PERMISSION_DENIED,
                                    "Only the admin user can add new users.")

        user = User(self._issue_id(), username, password)
        self.users[user.id] = user
        logger.info(f"新用户 '{username}' 已创建 (id={user.id})")
        return OpResult.success(
            f'User "{username}" created successfully with ID {user.id}.', user)

    def remove_user(self, requester_id: int, target_id: int) -> OpResult:
        """
        删除用户
        requester_id 为当前会话用户：管理员和当前活动用户都不能被删除
        """
        if target_id == ADMIN_ID:
            return OpResult.failure(ErrorKind.INVALID_OPERATION,
                                    "Cannot remove the admin user.")
        if target_id == requester_id or target_id == self.active_user_id:
            return OpResult.failure(ErrorKind.INVALID_OPERATION,
                                    "You cannot remove the currently active user.")
        if target_id not in self.users:
            return OpResult.failure(ErrorKind.NOT_FOUND,
                                    f"User with ID {target_id} not found.")

        del self.users[target_id]
        logger.info(f"用户 {target_id} 已被用户 {requester_id} 删除")
        return OpResult.success(f"User with ID {target_id} removed successfully.")

    def authenticate(self, user_id: int, password: str) -> bool:
        """明文精确比较密码"""
        user = self.users.get(user_id)
        return user is not None and user.password == password

    def switch_active_user(self, user_id: int, password: str) -> OpResult:
        """切换当前会话用户，失败时会话保持不变"""
        user = self.users.get(user_id)
        if user is None:
            return OpResult.failure(ErrorKind.NOT_FOUND,
                                    f"User with ID {user_id} not found.")
        if not self.authenticate(user_id, password):
            logger.warning(f"切换到用户 {user_id} 时密码错误")
            return OpResult.failure(ErrorKind.AUTHENTICATION_FAILED,
                                    "Incorrect password. User switch failed.")

        self.active_user_id = user_id
        logger.info(f"当前用户切换为 {user.username}@{user_id}")
        return OpResult.success(
            f'Switched to user "{user.username}" with ID {user_id}.', user)

    def get(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def list_users(self) -> List[User]:
        """按id顺序列出用户"""
        return [self.users[uid] for uid in sorted(self.users)]

    @property
    def active_user(self) -> User:
        return self.users[self.active_user_id]
