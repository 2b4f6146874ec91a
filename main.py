from src import create_app

app = create_app()


if __name__ == "__main__":
    app.logger.info(
        f"Starting todo app (mutation latency {app.config['MUTATION_LATENCY']}s, "
        f"database {app.config['DATABASE_URL']})"
    )
    # Quart's run handles SIGINT/SIGTERM and runs after_serving on shutdown
    app.run(host="0.0.0.0", port=8080, debug=app.config["DEBUG"])
