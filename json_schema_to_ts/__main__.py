from .json_schema_to_ts import json_schema_to_ts

if __name__ == "__main__":
    json_schema_to_ts()
