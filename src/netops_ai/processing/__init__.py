"""Event processing"""
