"""
main.py - Main entry point for the Data Table Engine API
"""
import logging
import uvicorn
from datatable_engine.config import config_manager
from datatable_engine.rest_api import create_api


def main():
    """
    Start the Data Table Engine server.
    """
    config = config_manager.load_config('env')
    logging.basicConfig(level=config.log_level)
    logger = logging.getLogger(__name__)

    api = create_api(config)
    app = api.get_app()

    logger.info("Starting Data Table Engine on %s:%d", config.api_host, config.api_port)
    logger.info("Rowspan hover=%s, max tree depth=%d", config.enable_rowspan_hover, config.max_tree_depth)

    uvicorn.run(app, host=config.api_host, port=config.api_port)

if __name__ == "__main__":
    main()
