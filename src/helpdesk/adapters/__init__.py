"""
Adapters - Implementações de infraestrutura dos ports do Core.
"""
