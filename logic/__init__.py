from logic.send_flow import SendFlow
from logic.state import SendStep
