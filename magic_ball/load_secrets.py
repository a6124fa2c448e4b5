import os
from dotenv import load_dotenv

load_dotenv()

user = os.getenv("DB_USER")
password = os.getenv("DB_PASSWORD")
host = os.getenv("DB_HOST")
port = os.getenv("DB_PORT", "5432")
db_name = os.getenv("DB_NAME")

openrouter_api_key = os.getenv("OPENROUTER_API_KEY")
openrouter_model = os.getenv("OPENROUTER_MODEL", "openai/gpt-4o-mini")
llm_timeout_seconds = float(os.getenv("LLM_TIMEOUT_SECONDS", "15"))
frontend_url = os.getenv("FRONTEND_URL", "*")
server_port = int(os.getenv("PORT", "3000"))

bot_token = os.getenv("BOT_TOKEN")
verify_init_data = os.getenv("VERIFY_INIT_DATA", "false").lower() in ("1", "true", "yes")
channel_id = os.getenv("CHANNEL_ID", "-1002959175149")
mini_app_url = os.getenv("MINI_APP_URL", "https://t.me/anc_pobajania_bot?startapp=daily")
image_url = os.getenv(
    "IMAGE_URL",
    "https://drive.google.com/uc?export=download&id=1-FeAzDErrhvYbfuFjNFAvFyCxOlGJ55W",
)
telegram_timeout_seconds = float(os.getenv("TELEGRAM_TIMEOUT_SECONDS", "10"))

if __name__ == "__main__":
    print(user, host, port, db_name, openrouter_model, channel_id)
