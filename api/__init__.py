"""
API HTTP para Soustack Lite.

Esta capa expone endpoints REST que usan el core (soustack_lite) y su
persistencia (soustack_lite.db).

La API está diseñada para ser consumida por:
- el editor web de recetas
- clientes externos que leen recetas publicadas
"""
