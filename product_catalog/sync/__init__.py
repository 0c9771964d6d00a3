import logging
from product_catalog.utils.logger import setup_logger

catalog_sync_logger = setup_logger(
    "catalog_sync",
    logging.DEBUG,
    log_file="catalog_sync.log"
)
