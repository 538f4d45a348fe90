from timeblock.config.manager import ConfigManager

__all__ = ['ConfigManager']
