"""
RecruitCall: provisions a voice recruiting agent and bridges an outbound
candidate call to it.
"""

__version__ = "0.1.0"
