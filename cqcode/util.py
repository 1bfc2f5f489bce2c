# cqcode/util.py

import os

def get_data_path():
    path = get_env('CQCODE_DATA_PATH')
    return path.strip() if path else 'data'

def get_log_dir():
    path = get_env('CQCODE_LOG_DIR')
    return path.strip() if path else None

def get_env(env: str):
    return os.environ.get(env)
