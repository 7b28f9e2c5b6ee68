from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()

from rentbook import create_app  # noqa: E402

app = create_app(os.getenv("CONFIG_CLASS", "rentbook.config.DevelopmentConfig"))

if __name__ == "__main__":
    port = int(os.getenv("PORT", 5001))
    app.run(host="0.0.0.0", port=port)
