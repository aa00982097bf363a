"""
ScootGuard: campus e-scooter theft awareness and route-safety service.
"""
