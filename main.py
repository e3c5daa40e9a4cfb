from dotenv import load_dotenv
import os

from telehealth import create_app

load_dotenv()

app = create_app()

def main():
    app.run(
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "5000")),
        debug=os.getenv("FLASK_DEBUG", "0") == "1",
    )

if __name__ == "__main__":
    main()
