"""
Subscription Tracker - Source Package

A small personal application for keeping track of recurring
subscriptions: what they are called, what they cost and when they renew.

DESIGN PRINCIPLES:
1. One owner for the subscription list (the store)
2. Whole-collection saves after every change
3. Failures degrade to "nothing happened", never to a crash
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Subscription Tracker Team"
