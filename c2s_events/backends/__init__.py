"""Collector transport backends"""

from .http import HTTPBackend, HTTPResult

__all__ = ['HTTPBackend', 'HTTPResult']
