import logging
import os


# Cashback Engine Configuration
class Config:
    LOG_LEVEL = os.environ.get("CASHBACK_LOG_LEVEL", "INFO")
    LOG_FILE = os.environ.get("CASHBACK_LOG_FILE")
    DEFAULT_EXPORT = os.environ.get("CASHBACK_DEFAULT_EXPORT", "xlsx")
    ALLOWED_EXTENSIONS = {'csv', 'xlsx', 'xls'}
    EXPORT_FORMATS = {'xlsx', 'csv', 'txt'}
    CURRENCY_SYMBOL = "R$"
    PARSE_ERROR_MESSAGE = (
        "Erro ao processar arquivo. Verifique se é um Excel válido "
        "e contém colunas 'Data', 'Jogo' e 'GGR'."
    )


def configure_logging(level: str = None, log_file: str = None) -> None:
    """Set up root logging the same way for library callers and scripts."""
    logging.basicConfig(
        filename=log_file or Config.LOG_FILE,
        level=getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s: %(message)s'
    )
