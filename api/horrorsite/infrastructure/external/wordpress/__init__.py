"""
Fuente externa de contenido: WordPress REST API -> PostgreSQL.

Este paquete se usa desde el job de sincronizacion (CLI) y desde el
endpoint de administracion; no participa del request/response normal.

Objetivos de diseño:
- Idempotencia: el slug del post es la llave, se puede correr N veces.
- Solo lectura contra WordPress.
- Reintentos acotados ante 429/5xx antes de abortar la corrida.
"""
