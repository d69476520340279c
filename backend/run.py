from app import create_app

app = create_app()

if __name__ == '__main__':
    # Plain Flask dev server; viewers sync by polling the /api/games endpoints
    app.run(debug=True)
