import logging
import os

CONSOLE_FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'
FILE_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'

# Libraries that log every RPC request at debug level
NOISY_LOGGERS = ('web3', 'urllib3', 'eth_abi')


def setup_logger(level=logging.INFO) -> logging.Logger:
    """ Setup main console handler """

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(console_handler)

    return root


def setup_file_logger(path: str, name: str = "paymee", log_level=logging.DEBUG) -> logging.FileHandler:
    """ Add a handler that writes the whole run, including debug output, to path/name.log """

    file_handler = logging.FileHandler(os.path.join(path, f'{name}.log'))
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))

    logging.getLogger().addHandler(file_handler)

    return file_handler
