import sys
from pathlib import Path

from loguru import logger


def GetProgramDir() -> Path:
    """
    获取程序根目录路径。

    在打包后的环境中，返回可执行文件所在目录。
    在开发环境中，返回项目根目录。
    """
    if getattr(sys, 'frozen', False):
        # PyInstaller 打包后的环境
        return Path(sys.executable).parent
    else:
        # 开发环境：当前文件所在目录的父目录的父目录
        return Path(__file__).parent.parent.parent


def GetConfigPath() -> Path:
    return GetProgramDir() / "config" / "jps_canvas.yaml"


def GetLogDir() -> Path:
    return GetProgramDir() / "Logs"


if __name__ == "__main__":
    logger.info(GetProgramDir())
    logger.info(GetConfigPath())
    logger.info(GetLogDir())
