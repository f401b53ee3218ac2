"""Command-line interface for the freelance marketplace"""
