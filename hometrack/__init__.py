"""
Home Tracker - Source Package

Tracks a home's value and the improvement projects that change it:
tasks, photos, estimates, receipts, contractors and a history of
finished work.

DESIGN PRINCIPLES:
1. Storage confirms → snapshot changes (never optimistic)
2. Fail visibly: every failed save shows the user an error
3. Guest sessions never touch the network
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Home Tracker Team"
