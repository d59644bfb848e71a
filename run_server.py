"""Run the TrackItAll API with the Flask development server."""

from trackitall import create_app

if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=app.config["TRACKITALL_CONFIG"].PORT)
