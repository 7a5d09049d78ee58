"""
Mensajes compartidos entre el motor de políticas y la capa HTTP.
"""

UNAUTHENTICATED_MESSAGE = "Usuario no autenticado o sin rol asignado"
