"""AI services: provider wrappers, processors and the learning system"""
