"""Access application layer: services and commands"""
