from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()

from simplecards_app import create_app

app = create_app()

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 8080))
    # Không dùng reloader: mỗi lần reload sẽ khởi động lại các import pool
    app.run(host='0.0.0.0', port=port, debug=os.environ.get('FLASK_DEBUG') == '1', use_reloader=False)
