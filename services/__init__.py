"""Bot services"""
