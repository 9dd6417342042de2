"""
日志系统 - 单例日志器
环境变量:
  FS_LOG_LEVEL  日志级别 (默认 ERROR，保持交互终端整洁)
  FS_LOG_FILE   额外写入的日志文件路径 (可选)
"""

import logging
import os


class FileSystemLogger:
    """单例日志器"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True

        self.logger = logging.getLogger('FileSystem')
        level_name = os.environ.get('FS_LOG_LEVEL', 'ERROR').upper()
        self.logger.setLevel(getattr(logging, level_name, logging.ERROR))

        formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')

        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        self.logger.addHandler(stream_handler)

        log_file = os.environ.get('FS_LOG_FILE')
        if log_file:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

        # 不向根日志器传播，避免重复输出
        self.logger.propagate = False

    def info(self, msg):
        self.logger.info(msg)

    def warning(self, msg):
        self.logger.warning(msg)

    def error(self, msg):
        self.logger.error(msg)

    def debug(self, msg):
        self.logger.debug(msg)


logger = FileSystemLogger()
