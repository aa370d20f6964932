"""Access infrastructure layer"""
