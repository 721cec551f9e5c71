"""Command, callback and message handlers"""
