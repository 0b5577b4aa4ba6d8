"""
NoteTree - 基于访问码的个人笔记服务
"""
__version__ = "1.0.0"
