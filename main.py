from rally_engine.parser import new_match, parse_rally

state = new_match()

# Sets 1-4 alternate: home aces, then away kills
for set_index in range(4):
    rally = "!4S." if set_index % 2 == 0 else "@10K."
    for _ in range(25):
        state = parse_rally(state, rally).state

# Set 5: 14-13, then home closes it out with a block
for _ in range(13):
    state = parse_rally(state, "!4S.").state
    state = parse_rally(state, "@10K.").state
state = parse_rally(state, "!4S.").state
state = parse_rally(state, "@10K7 !3B.").state

print("Final state:")
print(state.to_dict())

print("\nTrying to add a rally after the match...")

result = parse_rally(state, "!4S.")
print(result.to_dict())  # Fail: the match is already finished
