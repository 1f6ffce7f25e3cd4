"""
Gestión de Camareros - servicio API
"""
