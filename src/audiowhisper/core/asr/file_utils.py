import os
from typing import Optional

import platformdirs


def get_models_dir() -> str:
    return os.path.join(
        platformdirs.user_data_dir("AudioWhisper", appauthor=False), "models"
    )


def find_file_by_suffix(directory: str, *suffixes: str) -> Optional[str]:
    try:
        for filename in sorted(os.listdir(directory)):
            for suffix in suffixes:
                if filename.endswith(suffix):
                    return os.path.join(directory, filename)
    except OSError:
        pass
    return None


def resolve_model_dir(model: str) -> str:
    if os.path.isabs(model):
        return model
    return os.path.join(get_models_dir(), model)
