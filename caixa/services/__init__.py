# caixa/services/__init__.py
