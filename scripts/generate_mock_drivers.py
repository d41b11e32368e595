import csv
import random

FIRST_NAMES = ["Rajesh", "Priya", "Amit", "Sunita", "Vikram", "Kiran", "Anjali", "Rahul", "Meera", "Arjun"]
LAST_NAMES = ["Kumar", "Singh", "Shah", "Rao", "Das", "Mehta", "Iyer", "Nair"]
VEHICLES = {
    "sedan": ["Toyota Camry", "Honda City"],
    "suv": ["Mahindra XUV700", "Toyota Fortuner"],
    "luxury": ["Mercedes S-Class", "BMW 7 Series"],
    "auto": ["Bajaj RE"],
    "bike": ["Honda Shine"],
    "cycle": ["Hero Sprint"],
}
COLORS = ["Black", "White", "Silver", "Grey", "Red"]


def generate_mock_drivers(filename="mock_drivers_100.csv", count=100):
    with open(filename, mode='w', newline='') as file:
        writer = csv.writer(file)
        writer.writerow(["driver_id", "name", "phone", "email", "gender", "vehicle_type",
                         "model", "color", "number_plate", "rating", "is_available"])

        for i in range(count):
            driver_id = f"DRV-{str(i+1).zfill(3)}"
            first_name = random.choice(FIRST_NAMES)
            name = f"{first_name} {random.choice(LAST_NAMES)}"

            vehicle_type = random.choice(list(VEHICLES))

            # 80% chance of being available, 20% already on a ride
            is_available = random.random() < 0.8

            writer.writerow([
                driver_id,
                name,
                f"+91 9{random.randint(100000000, 999999999)}",
                f"{first_name.lower()}{i+1}@luxeride.com",
                random.choice(["male", "female", "other"]),
                vehicle_type,
                random.choice(VEHICLES[vehicle_type]),
                random.choice(COLORS),
                f"DL{random.randint(1, 12):02d}XY{i+1:04d}",
                round(random.uniform(3.5, 5.0), 1),
                is_available,
            ])

    print(f"Successfully generated {count} mock drivers into '{filename}'.")

if __name__ == "__main__":
    generate_mock_drivers()
