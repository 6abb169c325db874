"""
ClaimAssist - AI-assisted vehicle damage assessment backend
"""
__version__ = "1.0.0"
