#!/usr/bin/env python3
"""
Unix风格文件系统模拟器 - 主程序
功能：命令解析与分发，提供命令行界面进行交互操作

命令分发是纯函数式的：解析后的 Command -> CommandResult，
交互式的读取/提示循环只是外层适配器
"""

import sys
import getpass
import shlex
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from errors import ErrorKind, OpResult
from filesystem import (FileSystem, DEFAULT_ADMIN_PASSWORD, MAX_DISK_SIZE,
                        MIN_DISK_SIZE)
from logger import logger
from visualization import Visualizer

# ==================== 命令与结果 ====================


@dataclass
class Command:
    """解析后的命令；交互式参数(密码、确认等)由外层适配器补全"""
    name: str
    args: List[str] = field(default_factory=list)
    username: Optional[str] = None
    password: Optional[str] = None
    confirm: bool = False


@dataclass
class CommandResult:
    """命令执行结果，output 为需要显示的各行文本"""
    ok: bool
    output: List[str] = field(default_factory=list)
    error: Optional[ErrorKind] = None
    shutdown: bool = False

    @classmethod
    def from_op(cls, result: OpResult) -> 'CommandResult':
        if not result.ok:
            return cls(False, [f"Error: {result.message}"], result.error)
        return cls(True, [result.message] if result.message else [])

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> 'CommandResult':
        return cls(False, [f"Error: {message}"], error)


# 每个命令需要的位置参数，缺失时由交互适配器提示输入
ARG_PROMPTS: Dict[str, List[str]] = {
    'ls -i': ['Enter the name of the directory or file to list the Inode: '],
    'mkdir': ['Enter the name of the new directory: '],
    'rmdir': ['Enter the name of the directory to be removed: '],
    'touch': ['Enter the name of the file: ',
              'Enter the file size in bytes: ',
              'Enter the name of the directory: '],
    'rm': ['Enter the name of the directory containing the file to be removed: ',
           'Enter the name of the file to be removed: '],
    'rmuser': ['Enter the ID of the user to be removed: '],
    'su': ['Enter the ID of the user to switch to: '],
    'chmod': ['Enter the name of the directory to search for: ',
              'Enter the permission group to change (user, group, or general): ',
              'Enter the new permissions (e.g., rwx): '],
    'chown': ['Enter the name of the file/directory to change ownership: ',
              'Enter the new userId for the file/directory: '],
    'echo': ['Enter the name of the file to write to: ',
             'Enter the content to write to the file: '],
    'cat': ['Enter the name of the file to read: '],
    'cd': ['Enter the name of the directory to list contents: '],
}

HELP_TEXT = [
    '--- Available Commands ---',
    ' "ls" - List directories                  "shutdown" - Exit',
    ' "mkdir <name>" - Create directory        "rmdir <name>" - Remove directory',
    ' "touch <name> <size> <dir>" - Create file',
    ' "rm <dir> <file>" - Delete file          "su <id>" - Switch user',
    ' "adduser" - Add user                     "rmuser <id>" - Remove user',
    ' "lsuser" - List users                    "ls -i <name>" - List Inode',
    ' "mkfs" - Reset root directory            "df" - Display disk information',
    ' "chmod <name> <group> <rwx>" - Change permissions',
    ' "chown <name> <userId>" - Change file/directory ownership',
    ' "echo <file> <content>" - Write to file  "cat <file>" - Read file',
    ' "cd <name>" - List directory content     "viz <bitmap|disk> [png]" - Render disk',
    ' "help" - Show this menu',
]


def parse_command(line: str) -> Optional[Command]:
    """
    把一行输入解析为 Command
    'ls -i' 作为独立命令；echo 的内容保留原样(可含空格)
    """
    line = line.strip()
    if not line:
        return None

    head, _, rest = line.partition(' ')
    name = head.lower()

    if name == 'echo':
        target, _, content = rest.strip().partition(' ')
        args = [a for a in (target, content) if a]
        return Command(name, args)

    try:
        args = shlex.split(rest)
    except ValueError:
        args = rest.split()

    if name == 'ls' and args and args[0] == '-i':
        return Command('ls -i', args[1:])
    return Command(name, args)


def _parse_int(value: str, what: str) -> Optional[int]:
    try:
        return int(value, 10)
    except (TypeError, ValueError):
        logger.warning(f"{what} 不是整数: {value!r}")
        return None


# ==================== 系统管理类 ====================

class FileSystemSimulator:
    """
    文件系统模拟器
    持有 FileSystem 状态，把命令分发到各个 cmd_* 处理函数
    """

    def __init__(self, fs: FileSystem):
        self.fs = fs
        self.visualizer = Visualizer()
        self.handlers: Dict[str, Callable[[Command], CommandResult]] = {
            'help': self.cmd_help,
            'ls': self.cmd_list,
            'ls -i': self.cmd_inode,
            'df': self.cmd_disk_info,
            'mkdir': self.cmd_mkdir,
            'rmdir': self.cmd_rmdir,
            'touch': self.cmd_touch,
            'rm': self.cmd_rm,
            'adduser': self.cmd_adduser,
            'rmuser': self.cmd_rmuser,
            'lsuser': self.cmd_lsuser,
            'su': self.cmd_su,
            'mkfs': self.cmd_mkfs,
            'chmod': self.cmd_chmod,
            'chown': self.cmd_chown,
            'echo': self.cmd_echo,
            'cat': self.cmd_cat,
            'cd': self.cmd_cd,
            'viz': self.cmd_visualize,
            'shutdown': self.cmd_shutdown,
        }

    @property
    def prompt(self) -> str:
        user = self.fs.users.active_user
        return f"Enter the desired command (Current User: {user.username}@{user.id}): "

    def dispatch(self, command: Command) -> CommandResult:
        """执行一条命令，所有错误都以 CommandResult 返回"""
        handler = self.handlers.get(command.name)
        if handler is None:
            return CommandResult.failure(ErrorKind.INVALID_OPERATION,
                                         "Invalid command. Please use a supported command.")

        missing = len(ARG_PROMPTS.get(command.name, [])) - len(command.args)
        if missing > 0:
            return CommandResult.failure(ErrorKind.INVALID_FORMAT,
                                         f"Missing arguments for '{command.name}'.")
        return handler(command)

    # ==================== 目录与磁盘命令 ====================

    def cmd_help(self, command: Command) -> CommandResult:
        return CommandResult(True, list(HELP_TEXT))

    def cmd_list(self, command: Command) -> CommandResult:
        lines = ['--- Directory Listing ---', '--- Type - Name - InodeID ---']
        lines.extend(self.fs.list_tree())
        return CommandResult(True, lines)

    def cmd_inode(self, command: Command) -> CommandResult:
        result = self.fs.inode_info(command.args[0])
        if not result.ok:
            return CommandResult.from_op(result)

        info = result.value
        lines = ['--- Inode Information of Directory or File ---']
        lines.extend(_format_inode(info['inode']))
        for child in info.get('files', []):
            lines.append(f"File: {child['name']}")
            lines.extend(_format_inode(child['inode'], indent='  '))
        for child in info.get('subdirectories', []):
            lines.append(f"Subdirectory: {child['name']}")
            lines.extend(_format_inode(child['inode'], indent='  '))
        return CommandResult(True, lines)

    def cmd_disk_info(self, command: Command) -> CommandResult:
        info = self.fs.get_disk_info()
        return CommandResult(True, [
            '--- Disk Information ---',
            f"Total Bytes: {info['total_bytes']} bytes",
            f"Available Bytes: {info['free_bytes']}",
            f"Free Blocks: {info['free_blocks']}",
            f"Used Blocks: {info['used_blocks']}",
        ])

    def cmd_mkdir(self, command: Command) -> CommandResult:
        return CommandResult.from_op(self.fs.make_directory(command.args[0]))

    def cmd_rmdir(self, command: Command) -> CommandResult:
        return CommandResult.from_op(self.fs.remove_directory(command.args[0]))

    def cmd_touch(self, command: Command) -> CommandResult:
        name, size_text, parent = command.args[:3]
        size = _parse_int(size_text, "文件大小")
        if size is None:
            return CommandResult.failure(ErrorKind.INVALID_FORMAT,
                                         "File size must be an integer number of bytes.")
        return CommandResult.from_op(self.fs.create_file(name, size, parent))

    def cmd_rm(self, command: Command) -> CommandResult:
        parent, name = command.args[:2]
        return CommandResult.from_op(self.fs.remove_file(parent, name))

    def cmd_mkfs(self, command: Command) -> CommandResult:
        if not command.confirm:
            return CommandResult(True, ['Root directory reset canceled.'])
        return CommandResult.from_op(self.fs.reset_root())

    def cmd_cd(self, command: Command) -> CommandResult:
        name = command.args[0]
        result = self.fs.list_directory(name)
        if not result.ok:
            return CommandResult.from_op(result)
        return CommandResult(True, [f'--- Contents of Directory "{name}" ---'] + result.value)

    # ==================== 用户命令 ====================

    def cmd_adduser(self, command: Command) -> CommandResult:
        username = command.username if command.username is not None else (
            command.args[0] if command.args else '')
        return CommandResult.from_op(self.fs.add_user(username, command.password or ''))

    def cmd_rmuser(self, command: Command) -> CommandResult:
        user_id = _parse_int(command.args[0], "用户ID")
        if user_id is None:
            return CommandResult.failure(ErrorKind.INVALID_FORMAT, "User ID must be an integer.")
        return CommandResult.from_op(self.fs.remove_user(user_id))

    def cmd_lsuser(self, command: Command) -> CommandResult:
        lines = ['--- User List ---']
        lines.extend(f"ID: {u.id}, Name: {u.username}" for u in self.fs.users.list_users())
        return CommandResult(True, lines)

    def cmd_su(self, command: Command) -> CommandResult:
        user_id = _parse_int(command.args[0], "用户ID")
        if user_id is None:
            return CommandResult.failure(ErrorKind.INVALID_FORMAT, "User ID must be an integer.")
        return CommandResult.from_op(self.fs.switch_user(user_id, command.password or ''))

    # ==================== 权限与内容命令 ====================

    def cmd_chmod(self, command: Command) -> CommandResult:
        name, group, permission = command.args[:3]
        return CommandResult.from_op(
            self.fs.change_permissions(name, group, permission, command.password or ''))

    def cmd_chown(self, command: Command) -> CommandResult:
        name, owner_text = command.args[:2]
        new_owner = _parse_int(owner_text, "用户ID")
        if new_owner is None:
            return CommandResult.failure(ErrorKind.INVALID_FORMAT, "User ID must be an integer.")
        return CommandResult.from_op(self.fs.change_owner(name, new_owner))

    def cmd_echo(self, command: Command) -> CommandResult:
        name, content = command.args[0], ' '.join(command.args[1:])
        return CommandResult.from_op(self.fs.write_file(name, content))

    def cmd_cat(self, command: Command) -> CommandResult:
        result = self.fs.read_file(command.args[0])
        if not result.ok:
            return CommandResult.from_op(result)
        return CommandResult(True, ['--- Content ---', result.value, '---'])

    # ==================== 可视化与系统命令 ====================

    def cmd_visualize(self, command: Command) -> CommandResult:
        """生成磁盘块图或磁盘信息图"""
        viz_type = command.args[0] if command.args else 'bitmap'
        save_path = command.args[1] if len(command.args) > 1 else f"{viz_type}.png"

        if viz_type == 'bitmap':
            fig = self.visualizer.create_bitmap_figure(self.fs.get_bitmap_visual())
        elif viz_type == 'disk':
            fig = self.visualizer.create_disk_info_figure(self.fs.get_disk_info(),
                                                          self.fs.list_files())
        else:
            return CommandResult.failure(ErrorKind.INVALID_FORMAT,
                                         "Visualization type must be bitmap or disk.")

        try:
            self.visualizer.save_figure(fig, save_path)
        except (OSError, ValueError) as e:
            logger.warning(f"保存图表失败: {e}")
            return CommandResult.failure(ErrorKind.INVALID_OPERATION,
                                         f"Could not save figure to {save_path}: {e}")
        return CommandResult(True, [f"Figure saved to {save_path}"])

    def cmd_shutdown(self, command: Command) -> CommandResult:
        return CommandResult(True, ['Shutting down system.'], shutdown=True)


def _format_inode(info: Dict, indent: str = '') -> List[str]:
    """把 get_info() 字典格式化为多行文本"""
    lines = []
    for key, value in info.items():
        if key == 'permissions':
            bits = ', '.join(f"{group}: {_flags_to_string(flags)}"
                             for group, flags in value.items())
            lines.append(f"{indent}{key}: {bits}")
        else:
            lines.append(f"{indent}{key}: {value}")
    return lines


def _flags_to_string(flags: Dict[str, bool]) -> str:
    return (f"{'r' if flags['read'] else '-'}"
            f"{'w' if flags['write'] else '-'}"
            f"{'x' if flags['execute'] else '-'}")


# ==================== 交互式Shell ====================

def create_disk_interactive(input_func: Callable[[str], str] = input,
                            password_func: Callable[[str], str] = getpass.getpass) -> FileSystem:
    """提示输入磁盘大小和管理员密码，大小不合法时重新输入"""
    print("--- Creating Disk ---")
    while True:
        raw = input_func(f"Enter the disk size in bytes (between {MIN_DISK_SIZE} and "
                         f"{MAX_DISK_SIZE}, press Enter to use the maximum size - "
                         f"{MAX_DISK_SIZE} bytes): ").strip()
        size = MAX_DISK_SIZE if raw == '' else _parse_int(raw, "磁盘大小")
        if size is not None and MIN_DISK_SIZE <= size <= MAX_DISK_SIZE:
            break
        print(f"Error: Disk size must be between {MIN_DISK_SIZE} and {MAX_DISK_SIZE} bytes. "
              f"Please try again.")

    password = password_func(f'Enter the password for the admin user '
                             f'(press Enter for default password "{DEFAULT_ADMIN_PASSWORD}"): ')
    result = FileSystem.create_disk(size, password)
    print(result.message)
    return result.value


def complete_command(command: Command, simulator: FileSystemSimulator,
                     input_func: Callable[[str], str] = input,
                     password_func: Callable[[str], str] = getpass.getpass) -> Command:
    """交互补全：缺失的位置参数、密码、确认"""
    prompts = ARG_PROMPTS.get(command.name, [])
    for prompt in prompts[len(command.args):]:
        command.args.append(input_func(prompt).strip())

    if command.name == 'adduser':
        command.username = input_func('Enter the new user name: ').strip()
        command.password = password_func('Enter the password for the new user: ')
    elif command.name == 'su':
        if simulator.fs.users.get(_parse_int(command.args[0], "用户ID")) is not None:
            command.password = password_func('Enter the password: ')
    elif command.name == 'chmod':
        command.password = password_func('Enter the password for permission change: ')
    elif command.name == 'mkfs':
        answer = input_func('Are you sure you want to reset the root directory? [y/n]: ')
        command.confirm = answer.strip().lower() in ('y', 'yes')
    return command


def run_shell():
    """运行交互式Shell"""
    try:
        fs = create_disk_interactive()
    except (EOFError, KeyboardInterrupt):
        print("\nShutting down system.")
        return

    simulator = FileSystemSimulator(fs)
    print("\nType 'help' to see the available commands.\n")

    while True:
        try:
            command = parse_command(input(simulator.prompt))
            if command is None:
                continue
            command = complete_command(command, simulator)
            result = simulator.dispatch(command)
            for line in result.output:
                print(line)
            if result.shutdown:
                break
        except KeyboardInterrupt:
            print("\n")
            continue
        except EOFError:
            print("\nShutting down system.")
            break


# ==================== 演示程序 ====================

def run_demo():
    """运行演示程序"""
    fs = FileSystem.create_disk(4096, '').value
    simulator = FileSystemSimulator(fs)

    steps = [
        ("1. 创建目录与文件", [
            Command('mkdir', ['docs']),
            Command('touch', ['report.txt', '600', 'docs']),
            Command('ls'),
        ]),
        ("2. 写入与读取", [
            Command('echo', ['report.txt', 'first draft']),
            Command('echo', ['report.txt', 'second draft']),
            Command('cat', ['report.txt']),
        ]),
        ("3. 用户与权限", [
            Command('adduser', username='alice', password='secret'),
            Command('su', ['1'], password='secret'),
            Command('echo', ['report.txt', 'alice was here']),
            Command('su', ['0'], password=DEFAULT_ADMIN_PASSWORD),
            Command('chmod', ['report.txt', 'general', 'rw']),
            Command('su', ['1'], password='secret'),
            Command('echo', ['report.txt', 'alice was here']),
        ]),
        ("4. 磁盘信息", [
            Command('df'),
            Command('touch', ['big.bin', '4096', 'docs']),
        ]),
    ]

    print("=" * 60)
    print("              File system simulator demo")
    print("=" * 60)
    for title, commands in steps:
        print(f"\n>>> {title}")
        for command in commands:
            print(f"$ {command.name} {' '.join(command.args)}".rstrip())
            for line in simulator.dispatch(command).output:
                print(f"  {line}")


def main():
    if len(sys.argv) > 1 and sys.argv[1] == 'demo':
        run_demo()
    else:
        run_shell()
    sys.exit(0)


# ==================== 主程序入口 ====================

if __name__ == "__main__":
    main()
